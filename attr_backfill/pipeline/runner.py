from enum import Enum
from typing import Optional
import logging

from attr_backfill.core.errors import BackfillError
from attr_backfill.models.schemas import RunStats
from attr_backfill.pipeline.filters import select_missing
from attr_backfill.pipeline.paginator import Paginator
from attr_backfill.pipeline.updater import Updater

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    SCANNING = "scanning"
    DONE = "done"


class BackfillRunner:
    """Scan -> filter -> derive/update loop over a whole table.

    Scan failures propagate to the caller and abort the run; per-record
    failures are counted in ``RunStats.failed``.
    """

    def __init__(self,
                 table_name: str,
                 missing_attribute: str,
                 paginator: Paginator,
                 updater: Updater,
                 log: Optional[logging.Logger] = None):
        self.table_name = table_name
        self.missing_attribute = missing_attribute
        self.paginator = paginator
        self.updater = updater
        self.log = log or logger
        self.state = RunState.SCANNING

    async def run(self) -> RunStats:
        stats = RunStats()
        self.state = RunState.SCANNING
        self.log.info("Starting to process table: %s", self.table_name)
        self.log.info("Looking for items missing attribute: %s", self.missing_attribute)

        try:
            async for page in self.paginator.pages():
                to_update = select_missing(page.items, self.missing_attribute)
                stats.record_page(len(page.items), len(to_update))
                self.log.info("Scanned %d items (Total: %d)", len(page.items), stats.scanned)
                self.log.info("Found %d items without '%s' attribute", len(to_update), self.missing_attribute)

                if to_update:
                    outcomes = await self.updater.apply_batch(to_update)
                    stats.record_outcomes(outcomes)
                    ok = sum(1 for o in outcomes if o.success)
                    self.log.info("Batch complete: %d successful, %d failed", ok, len(outcomes) - ok)
        except BackfillError as e:
            self.log.error("Aborting run on table %s after %s: %s", self.table_name, stats.summary(), e)
            raise

        self.state = RunState.DONE
        self.log.info("Processing complete! %s", stats.summary())
        return stats
