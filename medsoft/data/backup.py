"""Export collections as JSON/CSV and restore them from a JSON backup."""

from __future__ import annotations

import csv
import io
import json
import logging
from typing import Dict, Iterable, List

from medsoft.data.repository import Repository

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("json", "csv")


def _csv_value(value):
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def export_collection(name: str, records: Iterable, fmt: str = "json") -> str:
    """Serialize ``records`` for download. Raises ValueError when there is nothing to export."""
    fmt = fmt.lower()
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}")

    rows: List[Dict[str, object]] = [record.to_dict() for record in records]
    if not rows:
        raise ValueError(f"No data found for {name} to export.")

    if fmt == "json":
        return json.dumps(rows, indent=2, ensure_ascii=False)

    headers = list(rows[0])
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_csv_value(row.get(header)) for header in headers])
    return buffer.getvalue()


def import_backup(text: str, repositories: Dict[str, Repository], record_types: Dict[str, type]) -> List[str]:
    """Overwrite every collection present in a JSON backup.

    ``record_types`` maps a collection name to the record class whose
    ``from_dict`` rebuilds it. Returns the names of the collections restored.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError("The selected file is not a valid backup file.") from exc
    if not isinstance(data, dict):
        raise ValueError("The selected file is not a valid backup file.")

    # Validate everything before writing anything.
    parsed = {}
    for name, rows in data.items():
        if name not in repositories:
            logger.warning("Skipping unknown collection '%s' in backup.", name)
            continue
        if isinstance(rows, str):
            rows = json.loads(rows)
        if not isinstance(rows, list):
            raise ValueError(f"Collection '{name}' in backup is not a list.")
        if not all(isinstance(row, dict) for row in rows):
            raise ValueError(f"Collection '{name}' in backup holds rows that are not records.")
        parsed[name] = [record_types[name].from_dict(row) for row in rows]

    for name, records in parsed.items():
        repositories[name].save_all(records)
        logger.info("Restored %d %s records from backup.", len(records), name)
    return list(parsed)
