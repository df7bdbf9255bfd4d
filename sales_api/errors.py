# sales_api/errors.py


class SalesApiError(Exception):
    """Base class for errors raised by the store, the seeder and the query layer."""


class InvalidMonthError(SalesApiError, ValueError):
    """The month parameter is not one of the twelve English month names."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid month: {value!r}")


class StoreError(SalesApiError):
    """The database could not be reached or rejected a statement."""


class DuplicateKeyError(StoreError):
    """A bulk insert hit an id that is already present."""


class FetchError(SalesApiError):
    """The remote dataset was unreachable or malformed."""
