# sales_api/store.py
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List

from sqlalchemy import Engine, delete, func, insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .database import Base, SessionLocal
from .errors import DuplicateKeyError, StoreError
from .models import Transaction
from .utils.logging import get_logger

logger = get_logger(__name__)

@contextmanager
def translate_errors(action: str) -> Iterator[None]:
    """Re-raises SQLAlchemy failures as StoreError (DuplicateKeyError for id collisions)."""
    try:
        yield
    except IntegrityError as e:
        raise DuplicateKeyError(f"{action} failed: duplicate transaction id ({e.orig})") from e
    except SQLAlchemyError as e:
        raise StoreError(f"{action} failed: {e}") from e

class TransactionStore:
    """
    Owns the transactions table. Rows are only ever written here, in bulk.

    Args:
        engine: SQLAlchemy engine created once at process start
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def ensure_schema(self):
        """Creates the table and its date_of_sale index if they are missing."""
        with translate_errors("Creating transactions table"):
            Base.metadata.create_all(bind=self.engine, tables=[Transaction.__table__])

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = SessionLocal(bind=self.engine)
        try:
            yield db
        finally:
            db.close()

    def count(self) -> int:
        with translate_errors("Counting transactions"):
            with self.engine.connect() as connection:
                return connection.scalar(select(func.count()).select_from(Transaction))

    def bulk_insert(self, records: Iterable[Dict]) -> int:
        """
        Inserts a batch of records with their upstream ids, all or nothing.

        Raises:
            DuplicateKeyError: If an id is already stored or repeated in the batch
            StoreError: On any other database failure
        """
        records = list(records)
        if not records:
            return 0

        with translate_errors("Inserting transactions"):
            with self.engine.begin() as connection:
                connection.execute(insert(Transaction), records)

        logger.debug("Inserted %d transactions", len(records))
        return len(records)

    def truncate_and_reload(self, records: Iterable[Dict]) -> int:
        """
        Replaces every row with the given records and returns the new row count.

        Delete and insert run in one database transaction, so a failed insert
        rolls back to the previous contents instead of leaving the table empty.
        """
        records: List[Dict] = list(records)

        with translate_errors("Reloading transactions"):
            with self.engine.begin() as connection:
                deleted = connection.execute(delete(Transaction)).rowcount
                logger.info("Cleared %s existing transactions", deleted)
                if records:
                    connection.execute(insert(Transaction), records)
                return connection.scalar(select(func.count()).select_from(Transaction))
