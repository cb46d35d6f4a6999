from typing import Any, Dict, Iterable, List, Sequence

from attr_backfill.models.schemas import Record


def select_missing(records: Iterable[Record], attribute_name: str) -> List[Record]:
    """Records where ``attribute_name`` is not a key at all.

    A present attribute holding None, "" or 0 still excludes the record.
    """
    return [record for record in records if attribute_name not in record]


def extract_key(record: Record, key_attribute_names: Sequence[str]) -> Dict[str, Any]:
    # Names absent on the record are skipped; the store rejects an incomplete key.
    return {name: record[name] for name in key_attribute_names if name in record}
