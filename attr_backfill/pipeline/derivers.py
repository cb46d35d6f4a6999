"""
Value derivation strategies.

A deriver is any callable taking a record and returning the value to write to
the target attribute. It raises MalformedIdentifier when the record does not
carry what it needs; the updater counts that as a failed update.

ARN format: arn:partition:service:region:account-id:resource
Example: arn:aws:genesis:us-west-2:886436930021:agent/cec918a7-b0c3-4198-af01-017b689a35a9
"""
import re
from typing import Any, Callable, Optional

from attr_backfill.core.config import settings
from attr_backfill.core.errors import MalformedIdentifier
from attr_backfill.models.schemas import Record

ValueDeriver = Callable[[Record], Any]

MIN_ARN_SEGMENTS = 6
OWNER_SEGMENT_INDEX = 4
# [0-9] rather than \d: only ASCII digits are valid account ids
_ACCOUNT_ID_RE = re.compile(r"[0-9]{12}")


def derive_owner_id(identifier: Any) -> str:
    if not identifier or not isinstance(identifier, str):
        raise MalformedIdentifier("Invalid ARN: ARN must be a non-empty string")

    segments = identifier.split(":")
    if len(segments) < MIN_ARN_SEGMENTS:
        raise MalformedIdentifier(
            f"Invalid ARN format: {identifier}. Expected format: arn:partition:service:region:account-id:resource"
        )

    owner_id = segments[OWNER_SEGMENT_INDEX]
    if not owner_id:
        raise MalformedIdentifier(f"No account ID found in ARN: {identifier}")

    if not _ACCOUNT_ID_RE.fullmatch(owner_id):
        raise MalformedIdentifier(f"Invalid account ID format: {owner_id}. Account ID must be 12 digits")

    return owner_id


class ArnAccountIdDeriver:
    """Reads an ARN from ``source_attribute`` and returns its account id."""

    def __init__(self, source_attribute: Optional[str] = None):
        self.source_attribute = settings.source_attribute if source_attribute is None else source_attribute

    def __call__(self, record: Record) -> str:
        if self.source_attribute not in record:
            raise MalformedIdentifier(f"Record has no '{self.source_attribute}' attribute")
        return derive_owner_id(record[self.source_attribute])

    def __repr__(self) -> str:
        return f"ArnAccountIdDeriver(source_attribute={self.source_attribute!r})"
