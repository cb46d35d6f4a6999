class BackfillError(Exception):
    """Base class for errors raised by the backfill pipeline."""


class TransportFailure(BackfillError):
    """A scan or update request against the table could not be completed."""

    def __init__(self, operation: str, table_name: str, message: str):
        self.operation = operation
        self.table_name = table_name
        super().__init__(f"{operation} on table {table_name} failed: {message}")


class MalformedIdentifier(BackfillError, ValueError):
    """The source identifier does not carry a valid owner id."""
