# sales_api/flows.py
from typing import Dict, List, Optional

from prefect import flow, task

from .config import Settings, settings
from .database import create_db_engine
from .seeding import fetch_dataset
from .store import TransactionStore

@task
def fetch_dataset_task(seed_url: str, timeout: int = 30) -> List[Dict]:
    return fetch_dataset(seed_url, timeout)

@task
def reload_store_task(records: List[Dict], database_url: str) -> int:
    """
    Replaces the transactions table contents, creating the table if needed.

    Args:
        records: Rows produced by fetch_dataset
        database_url: SQLAlchemy URL of the target database

    Returns:
        int: Number of rows in the table afterwards
    """
    engine = create_db_engine(Settings(DATABASE_URL=database_url))
    try:
        store = TransactionStore(engine)
        store.ensure_schema()
        return store.truncate_and_reload(records)
    finally:
        engine.dispose()

@flow(name="Transactions Reseed Pipeline")
def run_reseed_pipeline(database_url: Optional[str] = None, seed_url: Optional[str] = None) -> int:
    """
    Reloads the transactions table from the remote dataset, outside the API process.
    """
    records = fetch_dataset_task(seed_url or settings.SEED_URL, settings.FETCH_TIMEOUT)
    return reload_store_task(records, database_url or settings.get_database_url())
