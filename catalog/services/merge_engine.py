"""
Merge Engine
Applies only the fields an import actually supplied onto an existing record.
"""
import logging
from datetime import datetime
from typing import Callable, Optional

from catalog.models.record import (
    ProductRecord, STRING_FIELDS, NUMERIC_FIELDS, LIST_FIELDS,
)
from catalog.utils.helpers import first_non_empty, fold_turkish

logger = logging.getLogger(__name__)

# Fields with their own merge policy below
_SPECIAL_STRINGS = ('category', 'image_url')


def merge(existing: ProductRecord, incoming: ProductRecord, options,
          resolve_category: Optional[Callable[[str], Optional[int]]] = None) -> ProductRecord:
    """
    Return a new record: a copy of existing with non-empty incoming values laid over it.
    Strings win when non-blank, numbers when > 0, lists when they hold any value.
    """
    merged = existing.copy()

    for name in STRING_FIELDS:
        if name in _SPECIAL_STRINGS:
            continue
        value = getattr(incoming, name)
        if value is not None and str(value).strip():
            setattr(merged, name, value)

    for name in NUMERIC_FIELDS:
        value = getattr(incoming, name) or 0
        if value > 0:
            setattr(merged, name, value)

    for name in LIST_FIELDS:
        values = getattr(incoming, name) or []
        if any(v and str(v).strip() for v in values):
            setattr(merged, name, list(values))

    # Category: name and reference move together
    if incoming.category and incoming.category.strip():
        merged.category = incoming.category.strip()
        category_id = incoming.category_id
        if category_id is None and resolve_category is not None:
            category_id = resolve_category(merged.category)
        if fold_turkish(merged.category) != fold_turkish((existing.category or '').strip()):
            # Unresolved new name clears the old reference
            merged.category_id = category_id
        elif category_id is not None:
            merged.category_id = category_id
        if merged.category != existing.category:
            logger.info(f"Category changed: '{existing.category or '-'}' -> '{merged.category}' "
                        f"(ID: {merged.category_id}) [Product: {existing.name}]")

    if not options.preserve_archive_status:
        merged.is_archived = bool(incoming.is_archived)

    if incoming.image_url and incoming.image_url.strip():
        merged.image_url = incoming.image_url
    primary = first_non_empty(incoming.image_urls)
    if primary:
        merged.image_url = primary

    merged.id = existing.id
    merged.created_date = existing.created_date
    merged.updated_date = datetime.now()
    merged.source_row = incoming.source_row
    return merged.normalize()
