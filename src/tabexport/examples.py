"""
Example records for demos and tests.

Builds a small order book: each order has a nested customer (itself with
a nested address), an optional note, a creation instant and a delivery
window interval.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from tabexport.values import Interval


@dataclass
class Address:
    city: str
    postcode: str


@dataclass
class Customer:
    name: str
    address: Address


@dataclass
class Order:
    id: int
    customer: Customer
    total: float
    paid: bool
    created_at: datetime
    delivery: Interval
    note: Optional[str] = None


def build_example_orders(order_count: int = 3, start: Optional[datetime] = None) -> List[Order]:
    if start is None:
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)

    cities = [("Leeds", "LS1"), ("York", "YO1"), ("Hull", "HU1")]
    orders = []
    for i in range(1, order_count + 1):
        city, postcode = cities[(i - 1) % len(cities)]
        created = start + timedelta(hours=i)
        orders.append(Order(
            id=i,
            customer=Customer(name=f"customer{i}", address=Address(city=city, postcode=postcode)),
            total=round(9.99 * i, 2),
            paid=i % 2 == 1,
            created_at=created,
            delivery=Interval(created + timedelta(days=1), created + timedelta(days=2)),
            # every third order carries a note; the rest are missing
            note="leave at door" if i % 3 == 0 else None,
        ))
    return orders
