"""Customer lookup and registration."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Tuple

from medsoft.models.customer import Customer
from medsoft.models.medicine import to_int

_MOBILE_RE = re.compile(r"^\d{10,12}$")
_NAME_RE = re.compile(r"^[a-zA-Z\s]+$")


def search_customers(customers: Iterable[Customer], query: str, min_length: int = 0) -> List[Customer]:
    """Match on name (case-insensitive) or mobile number substring."""
    customers = list(customers)
    if len(query) < min_length:
        return []
    if not query:
        return customers
    needle = query.lower()
    return [c for c in customers if needle in c.name.lower() or query in c.mobile]


def guess_customer_fields(query: str) -> Dict[str, str]:
    """Pre-fill a new customer form from whatever was typed in the search box."""
    return {
        "name": query if _NAME_RE.match(query) else "",
        "mobile": query if _MOBILE_RE.match(query) else "",
        "address": "",
        "age": "",
    }


def add_customer(
    customers: List[Customer],
    name: str,
    mobile: str,
    address: str = "",
    age: Optional[str] = None,
) -> Customer:
    """Append a new customer to ``customers`` and return it."""
    name = name.strip()
    mobile = mobile.strip()
    if not name or not mobile:
        raise ValueError("Customer name and mobile are required.")

    customer = Customer(
        id=len(customers) + 1,
        name=name,
        mobile=mobile,
        address=address,
        age=to_int(age, default=0) or None,
    )
    customers.append(customer)
    return customer


def find_or_add_customer(
    customers: List[Customer], query: str, name: str = "", mobile: str = ""
) -> Tuple[Customer, bool]:
    """Return the customer ``query`` identifies, registering one if nobody matches.

    The second item is True when a new customer was added. A query that
    matches several customers must match one of them exactly by name or mobile.
    """
    matches = search_customers(customers, query, min_length=2)
    if len(matches) > 1:
        exact = [c for c in matches if c.name.lower() == query.lower() or c.mobile == query]
        if len(exact) != 1:
            raise ValueError(f"'{query}' matches {len(matches)} customers; be more specific.")
        matches = exact
    if matches:
        return matches[0], False

    fields = guess_customer_fields(query)
    customer = add_customer(customers, name or fields["name"], mobile or fields["mobile"])
    return customer, True
