"""Excel repository: one worksheet per collection in a shared workbook."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Dict, Generic, Iterable, List, Optional, TypeVar

from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from medsoft import config
from medsoft.config import StoreSettings
from medsoft.models.customer import Customer, Sale
from medsoft.models.medicine import MedicineRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Header text -> record field.
MEDICINE_COLUMNS: Dict[str, str] = {
    "ID": "id",
    "Brand_Name": "brand_name",
    "Generic_Name": "generic_name",
    "Strength": "strength",
    "Form": "form",
    "HSN": "hsn",
    "Batch_No": "batch_no",
    "Expiry_Date": "expiry_date",
    "Stock": "stock",
    "MRP": "mrp",
    "GST": "gst",
}

CUSTOMER_COLUMNS: Dict[str, str] = {
    "ID": "id",
    "Name": "name",
    "Mobile": "mobile",
    "Address": "address",
    "Age": "age",
    "Gender": "gender",
    "Prescriptions": "prescriptions",
}

SALE_COLUMNS: Dict[str, str] = {
    "Invoice_ID": "invoice_id",
    "Customer": "customer",
    "Date": "date",
    "Total": "total",
    "Status": "status",
    "Items": "items",
}

SETTINGS_HEADERS = ("Key", "Value")


def _open_workbook(path: Path) -> Workbook:
    if path.exists():
        return load_workbook(path)
    workbook = Workbook()
    # Drop the blank default sheet; collections add their own.
    workbook.remove(workbook.active)
    return workbook


def _replace_sheet(workbook: Workbook, sheet_name: str) -> Worksheet:
    if sheet_name in workbook.sheetnames:
        index = workbook.sheetnames.index(sheet_name)
        workbook.remove(workbook[sheet_name])
        return workbook.create_sheet(sheet_name, index)
    return workbook.create_sheet(sheet_name)


def _save_workbook(workbook: Workbook, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(path)


class ExcelRepository(Generic[T]):
    """Reads and writes one collection as rows of a worksheet."""

    def __init__(
        self,
        sheet_name: str,
        columns: Dict[str, str],
        from_dict: Callable[[Dict[str, object]], T],
        path: Path | str = None,
    ) -> None:
        self.path: Path = Path(path) if path else config.WORKBOOK_PATH
        self.sheet_name = sheet_name
        self.columns = columns
        self._from_dict = from_dict

    def _detect_columns(self, sheet: Worksheet) -> Dict[str, int]:
        """Map record fields to column indexes; raises if any are missing."""
        headers: Dict[str, int] = {}
        for idx, cell in enumerate(sheet[1], start=1):
            if cell.value is not None:
                headers[str(cell.value).strip()] = idx

        missing = [col for col in self.columns if col not in headers]
        if missing:
            raise ValueError(
                f"Missing required columns in sheet '{self.sheet_name}': {', '.join(missing)}"
            )
        return {key: headers[header] for header, key in self.columns.items()}

    def get_all(self) -> List[T]:
        """Return every record in sheet order; an absent sheet is an empty collection."""
        if not self.path.exists():
            logger.debug("Workbook %s not found; '%s' is empty.", self.path, self.sheet_name)
            return []
        workbook = load_workbook(self.path)
        if self.sheet_name not in workbook.sheetnames:
            return []

        sheet = workbook[self.sheet_name]
        col_map = self._detect_columns(sheet)
        records: List[T] = []
        for row in sheet.iter_rows(min_row=2, values_only=True):
            if all(value in (None, "") for value in row):
                continue
            data = {key: row[idx - 1] if idx - 1 < len(row) else None for key, idx in col_map.items()}
            records.append(self._from_dict(data))
        return records

    def save_all(self, records: Iterable[T]) -> None:
        """Rewrite the whole sheet with ``records`` and save the workbook."""
        records = list(records)
        workbook = _open_workbook(self.path)
        sheet = _replace_sheet(workbook, self.sheet_name)
        sheet.append(list(self.columns))
        for record in records:
            data = record.to_dict()
            sheet.append([self._cell_value(data.get(key)) for key in self.columns.values()])
        _save_workbook(workbook, self.path)
        logger.debug("Saved %d rows to '%s' in %s.", len(records), self.sheet_name, self.path)

    @staticmethod
    def _cell_value(value):
        if isinstance(value, (list, dict)):
            return json.dumps(value)
        return value


def medicines_repository(path: Path | str = None) -> ExcelRepository[MedicineRecord]:
    return ExcelRepository(config.MEDICINES_SHEET, MEDICINE_COLUMNS, MedicineRecord.from_dict, path)


def customers_repository(path: Path | str = None) -> ExcelRepository[Customer]:
    return ExcelRepository(config.CUSTOMERS_SHEET, CUSTOMER_COLUMNS, Customer.from_dict, path)


def sales_repository(path: Path | str = None) -> ExcelRepository[Sale]:
    return ExcelRepository(config.SALES_SHEET, SALE_COLUMNS, Sale.from_dict, path)


def load_settings(path: Path | str = None) -> StoreSettings:
    """Read store settings from the key/value sheet, falling back to defaults."""
    path = Path(path) if path else config.WORKBOOK_PATH
    if not path.exists():
        return StoreSettings()
    workbook = load_workbook(path)
    if config.SETTINGS_SHEET not in workbook.sheetnames:
        return StoreSettings()

    values: Dict[str, object] = {}
    for row in workbook[config.SETTINGS_SHEET].iter_rows(min_row=2, values_only=True):
        if not row or row[0] in (None, ""):
            continue
        values[str(row[0]).strip()] = row[1] if len(row) > 1 else None
    return StoreSettings.from_dict(values)


def save_settings(settings: StoreSettings, path: Path | str = None) -> None:
    path = Path(path) if path else config.WORKBOOK_PATH
    workbook = _open_workbook(path)
    sheet = _replace_sheet(workbook, config.SETTINGS_SHEET)
    sheet.append(list(SETTINGS_HEADERS))
    for key, value in settings.to_dict().items():
        sheet.append([key, value])
    _save_workbook(workbook, path)


def open_repositories(path: Path | str = None) -> Dict[str, ExcelRepository]:
    """All collection repositories keyed by the names used in backups."""
    return {
        "medicines": medicines_repository(path),
        "customers": customers_repository(path),
        "recentSales": sales_repository(path),
    }
