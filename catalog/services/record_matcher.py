"""
Record Matcher
Resolves an incoming draft against the existing catalog: id, then SKU, then exact name.
"""
from typing import Dict, Iterable, Optional

from catalog.models.record import ProductRecord
from catalog.utils.helpers import turkish_lower


def _key(value) -> str:
    if not value:
        return ''
    return turkish_lower(str(value).strip())


class RecordIndex:
    """Lookups by id, SKU and name, built once per import and kept current as records are written."""

    def __init__(self, records: Iterable[ProductRecord] = ()):
        self.by_id: Dict[int, ProductRecord] = {}
        self.by_sku: Dict[str, ProductRecord] = {}
        self.by_name: Dict[str, ProductRecord] = {}
        for record in records:
            self.add(record)

    def __len__(self):
        return len(self.by_id)

    def add(self, record: ProductRecord):
        # First record wins for duplicate SKU/name keys, like a one-pass dictionary build
        if record.id and record.id > 0:
            self.by_id[record.id] = record
        sku = _key(record.sku)
        if sku and sku not in self.by_sku:
            self.by_sku[sku] = record
        name = _key(record.name)
        if name and name not in self.by_name:
            self.by_name[name] = record

    def replace(self, old: ProductRecord, new: ProductRecord):
        """Swap an updated record in, dropping keys that pointed to the old version."""
        for lookup, key in ((self.by_sku, _key(old.sku)), (self.by_name, _key(old.name))):
            if key and lookup.get(key) is old:
                del lookup[key]
        if self.by_id.get(old.id) is old:
            del self.by_id[old.id]
        self.add(new)


def build_index(records: Iterable[ProductRecord]) -> RecordIndex:
    return RecordIndex(records)


def match(draft: ProductRecord, index: RecordIndex) -> Optional[ProductRecord]:
    """Return the existing counterpart of draft, or None when it should be inserted."""
    if draft.id and draft.id > 0:
        found = index.by_id.get(draft.id)
        if found is not None:
            return found
    sku = _key(draft.sku)
    if sku:
        found = index.by_sku.get(sku)
        if found is not None:
            return found
    name = _key(draft.name)
    if name:
        found = index.by_name.get(name)
        if found is not None:
            return found
    return None
