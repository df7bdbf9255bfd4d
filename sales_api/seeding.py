# sales_api/seeding.py
from decimal import Decimal, InvalidOperation
from typing import Dict, List

import pandas as pd
import requests

from .errors import FetchError, StoreError
from .store import TransactionStore
from .utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ["id", "title", "description", "price", "category", "image", "sold", "dateOfSale"]

def _to_price(value) -> Decimal:
    price = Decimal(str(value)).quantize(Decimal("0.01"))
    if price < 0:
        raise ValueError(f"negative price {value!r}")
    return price

def _to_wall_clock(value):
    # Keep the local time written in the source and drop any UTC offset, so
    # "2021-12-01T00:30:00+05:30" stays in December.
    if not isinstance(value, str):
        raise ValueError(f"dateOfSale must be a date string, got {value!r}")
    stamp = pd.Timestamp(value)
    if pd.isna(stamp):
        raise ValueError(f"missing date {value!r}")
    return stamp.to_pydatetime().replace(tzinfo=None)

def parse_dataset(payload) -> List[Dict]:
    """
    Validates the upstream JSON and converts it into rows for the store.

    Args:
        payload: The decoded JSON body, expected to be an array of objects

    Returns:
        list: One dict per transaction, keyed by table column

    Raises:
        FetchError: If the payload is not shaped like the transactions dataset
    """
    if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
        raise FetchError("Dataset must be a JSON array of transaction objects")
    if not payload:
        return []

    df = pd.DataFrame(payload)

    missing_cols = set(REQUIRED_FIELDS) - set(df.columns)
    if missing_cols:
        raise FetchError(f"Dataset is missing required fields: {', '.join(sorted(missing_cols))}")

    df = df[REQUIRED_FIELDS]
    if df.isnull().any().any():
        empty = [col for col in REQUIRED_FIELDS if df[col].isnull().any()]
        raise FetchError(f"Dataset has empty values in: {', '.join(empty)}")

    if not df["sold"].map(pd.api.types.is_bool).all():
        raise FetchError("Dataset field 'sold' must be true or false")

    try:
        ids = pd.to_numeric(df["id"], errors="raise")
        if (ids % 1 != 0).any():
            raise ValueError("ids must be whole numbers")
        prices = df["price"].map(_to_price)
        dates = df["dateOfSale"].map(_to_wall_clock)
    except (ValueError, TypeError, InvalidOperation) as e:
        raise FetchError(f"Dataset contains corrupt or malformed data: {e}") from e

    return [
        {
            "id": int(row_id),
            "title": str(title),
            "description": str(description),
            "price": price,
            "category": str(category),
            "image": str(image),
            "sold": bool(sold),
            "date_of_sale": pd.Timestamp(date_of_sale).to_pydatetime(),
        }
        for row_id, title, description, price, category, image, sold, date_of_sale in zip(
            ids, df["title"], df["description"], prices, df["category"], df["image"], df["sold"], dates
        )
    ]

def fetch_dataset(url: str, timeout: int = 30) -> List[Dict]:
    """
    Downloads the transactions dataset and returns rows ready for the store.

    Raises:
        FetchError: If the source is unreachable, not JSON or malformed
    """
    logger.info("Fetching dataset from %s", url)
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(f"Could not fetch dataset from {url}: {e}") from e

    try:
        payload = response.json()
    except ValueError as e:
        raise FetchError(f"Dataset at {url} is not valid JSON: {e}") from e

    records = parse_dataset(payload)
    logger.info("Fetched %d transactions", len(records))
    return records

def bootstrap_if_empty(store: TransactionStore, url: str, timeout: int = 30) -> int:
    """
    Seeds an empty store at startup. Failures are logged, never raised, so the
    API still comes up (and serves empty results) when the source is down.

    Returns:
        int: Rows inserted, 0 when the store already had data or seeding failed
    """
    try:
        existing = store.count()
    except StoreError:
        logger.exception("Could not count transactions, skipping seed")
        return 0

    if existing:
        logger.info("Database already contains %d records, skipping seed", existing)
        return 0

    logger.info("No data found, seeding database...")
    try:
        inserted = store.bulk_insert(fetch_dataset(url, timeout))
    except (FetchError, StoreError):
        logger.exception("Seeding failed, starting with an empty transactions table")
        return 0

    logger.info("Seeded %d documents into transactions table", inserted)
    return inserted

def reseed(store: TransactionStore, url: str, timeout: int = 30) -> int:
    """
    Replaces the store contents with a fresh copy of the dataset.

    Returns:
        int: Number of rows in the table afterwards

    Raises:
        FetchError: If the dataset cannot be fetched or parsed
        StoreError: If clearing or inserting fails
    """
    records = fetch_dataset(url, timeout)
    store.ensure_schema()
    logger.info("Replacing transactions with %d fetched records", len(records))
    count = store.truncate_and_reload(records)
    logger.info("Inserted %d documents into transactions table", count)
    return count
