# sales_api/queries.py
"""
Month-scoped reads over the transactions table.

Every operation takes a month name first and rejects anything that is not an
exact English month name before a query is built. Months match on the
calendar month of date_of_sale only, so March 2021 and March 2022 are read
together.
"""
import math
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Union

from sqlalchemy import String, case, extract, func, or_, select
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import Session
from sqlalchemy.sql.functions import FunctionElement

from .errors import InvalidMonthError
from .models import Transaction
from .schemas import ChartEntry, CombinedView, Statistics, TransactionPage, TransactionRecord
from .store import translate_errors

class Month(Enum):
    January = 1
    February = 2
    March = 3
    April = 4
    May = 5
    June = 6
    July = 7
    August = 8
    September = 9
    October = 10
    November = 11
    December = 12

    @property
    def ordinal(self) -> int:
        return self.value

    @classmethod
    def parse(cls, value: Union["Month", str, None]) -> "Month":
        """Case-sensitive lookup by name; raises InvalidMonthError otherwise."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str) or value not in cls.__members__:
            raise InvalidMonthError(value)
        return cls[value]

# (label, inclusive upper bound); anything above the last bound is OPEN_BUCKET
PRICE_BUCKETS = (
    ("0-100", Decimal("100")),
    ("101-200", Decimal("200")),
    ("201-300", Decimal("300")),
    ("301-400", Decimal("400")),
    ("401-500", Decimal("500")),
    ("501-600", Decimal("600")),
    ("601-700", Decimal("700")),
    ("701-800", Decimal("800")),
    ("801-900", Decimal("900")),
)
OPEN_BUCKET = "901-above"
BUCKET_LABELS = tuple(label for label, _ in PRICE_BUCKETS) + (OPEN_BUCKET,)

class price_text(FunctionElement):
    """Price as text with two decimals, the way PostgreSQL casts NUMERIC(10,2)."""
    type = String()
    inherit_cache = True

@compiles(price_text)
def _price_text(element, compiler, **kw):
    return "CAST(%s AS VARCHAR)" % compiler.process(element.clauses, **kw)

# SQLite drops trailing zeros on cast (150.00 -> "150")
@compiles(price_text, "sqlite")
def _price_text_sqlite(element, compiler, **kw):
    return "printf('%%.2f', %s)" % compiler.process(element.clauses, **kw)

def _in_month(month: Month):
    return extract("month", Transaction.date_of_sale) == month.ordinal

def _price_bucket():
    return case(
        *[(Transaction.price <= upper, label) for label, upper in PRICE_BUCKETS],
        else_=OPEN_BUCKET,
    )

def list_transactions(
    db: Session,
    month,
    search: str = "",
    page: int = 1,
    per_page: Optional[int] = None,
) -> TransactionPage:
    """
    Returns the month's transactions, optionally narrowed by a search term.

    - **search**: case-insensitive substring of title, description or price
    - **page** / **per_page**: 1-indexed page; without per_page every match
      is returned as a single page
    """
    month = Month.parse(month)
    if page < 1 or (per_page is not None and per_page < 1):
        raise ValueError("page and per_page must be positive")

    query = select(Transaction).where(_in_month(month))

    term = (search or "").strip()
    if term:
        pattern = f"%{term}%"
        query = query.where(
            or_(
                Transaction.title.ilike(pattern),
                Transaction.description.ilike(pattern),
                price_text(Transaction.price).ilike(pattern),
            )
        )

    with translate_errors("Listing transactions"):
        total = db.scalar(select(func.count()).select_from(query.subquery()))

        query = query.order_by(Transaction.id)
        if per_page is not None:
            query = query.limit(per_page).offset((page - 1) * per_page)
        rows = db.scalars(query).all()

    records = [TransactionRecord.model_validate(row) for row in rows]

    if per_page is None:
        return TransactionPage(records=records, total=total, page=1, per_page=total, total_pages=1)

    return TransactionPage(
        records=records,
        total=total,
        page=page,
        per_page=per_page,
        total_pages=max(1, math.ceil(total / per_page)),
    )

def statistics(db: Session, month) -> Statistics:
    """Total sale amount plus sold / not sold counts for the month."""
    month = Month.parse(month)

    query = select(
        func.sum(case((Transaction.sold, Transaction.price))),
        func.count(case((Transaction.sold, 1))),
        func.count(case((~Transaction.sold, 1))),
    ).where(_in_month(month))

    with translate_errors("Calculating statistics"):
        total_sale, sold_items, not_sold_items = db.execute(query).one()

    # SUM over no rows is NULL
    if total_sale is None:
        total_sale = Decimal("0")

    return Statistics(
        total_sale=Decimal(total_sale).quantize(Decimal("0.01")),
        sold_items=sold_items or 0,
        not_sold_items=not_sold_items or 0,
    )

def bar_chart(db: Session, month) -> List[ChartEntry]:
    """Record counts per price bucket, non-empty buckets only, in bucket order."""
    month = Month.parse(month)

    bucketed = select(_price_bucket().label("bucket")).where(_in_month(month)).subquery()
    query = select(bucketed.c.bucket, func.count()).group_by(bucketed.c.bucket)

    with translate_errors("Generating bar chart data"):
        rows = db.execute(query).all()

    position = {label: i for i, label in enumerate(BUCKET_LABELS)}
    rows = sorted(rows, key=lambda row: position[row[0]])
    return [ChartEntry(label=label, count=count) for label, count in rows]

def pie_chart(db: Session, month) -> List[ChartEntry]:
    """Record counts per category for the month."""
    month = Month.parse(month)

    query = (
        select(Transaction.category, func.count())
        .where(_in_month(month))
        .group_by(Transaction.category)
        .order_by(Transaction.category)
    )

    with translate_errors("Generating pie chart data"):
        rows = db.execute(query).all()

    return [ChartEntry(label=category, count=count) for category, count in rows]

def combined(db: Session, month) -> CombinedView:
    month = Month.parse(month)
    return CombinedView(
        statistics=statistics(db, month),
        barchart=bar_chart(db, month),
        piechart=pie_chart(db, month),
    )
