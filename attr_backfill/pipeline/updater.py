from typing import Any, List, Optional, Protocol, Sequence
import asyncio
import logging

from attr_backfill.core.config import settings
from attr_backfill.models.schemas import Record, UpdateOutcome
from attr_backfill.pipeline.derivers import ValueDeriver
from attr_backfill.pipeline.filters import extract_key

logger = logging.getLogger(__name__)


class UpdateSink(Protocol):
    async def update_attribute(self, key: Record, attribute_name: str, value: Any) -> Record: ...


def _describe_key(key: Record) -> str:
    return ", ".join(f"{k}={v}" for k, v in key.items())


class Updater:
    """Writes one derived attribute per selected record.

    Any failure for a record (derivation, transport, rejected key) becomes a
    failed UpdateOutcome and never affects other records.
    """

    def __init__(self,
                 sink: UpdateSink,
                 target_attribute: str,
                 deriver: ValueDeriver,
                 key_attributes: Optional[Sequence[str]] = None,
                 concurrency: Optional[int] = None,
                 dry_run: bool = False,
                 log: Optional[logging.Logger] = None):
        self.sink = sink
        self.target_attribute = target_attribute
        self.deriver = deriver
        self.key_attributes = list(settings.key_attributes if key_attributes is None else key_attributes)
        self.concurrency = max(1, settings.update_concurrency if concurrency is None else concurrency)
        self.dry_run = dry_run
        self.log = log or logger

    async def apply_update(self, record: Record) -> UpdateOutcome:
        key = extract_key(record, self.key_attributes)
        try:
            value = self.deriver(record)
            if self.dry_run:
                self.log.info("Would update item with keys: %s -> %s=%s", _describe_key(key), self.target_attribute, value)
                return UpdateOutcome(success=True, key=key)
            updated = await self.sink.update_attribute(key, self.target_attribute, value)
        except Exception as e:
            self.log.warning("Failed to update item with keys: %s - %s", _describe_key(key), e)
            return UpdateOutcome(success=False, key=key, error_message=str(e) or type(e).__name__)
        self.log.info("Updated item with keys: %s", _describe_key(key))
        return UpdateOutcome(success=True, key=key, updated_record=updated)

    async def apply_batch(self, records: Sequence[Record]) -> List[UpdateOutcome]:
        """Apply updates for one page; outcomes are returned in input order."""
        if self.concurrency == 1:
            return [await self.apply_update(record) for record in records]

        semaphore = asyncio.Semaphore(self.concurrency)

        async def _bounded(record: Record) -> UpdateOutcome:
            async with semaphore:
                return await self.apply_update(record)

        # apply_update never raises, so one failure cannot cancel siblings
        return list(await asyncio.gather(*(_bounded(r) for r in records)))
