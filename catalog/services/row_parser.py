"""
Row Parser
Turns one row (canonical headers + raw string values) into a draft ProductRecord.
Malformed values fall back to field defaults; only a missing name rejects the row.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from catalog.models.record import (
    ProductRecord, MARKETPLACE_BARCODE_FIELDS, FEATURE_FIELDS, FLOAT_FIELDS,
)
from catalog.services.header_normalizer import (
    normalize_headers, unmapped_headers, fold_header, LIST_HEADER_PREFIXES,
)
from catalog.utils.helpers import (
    to_float, to_int, parse_datetime, is_truthy, set_indexed, first_non_empty, decode_logo_barcodes,
    TRUTHY_TOKENS, ARCHIVED_TOKENS,
)

logger = logging.getLogger(__name__)

# canonical field -> record attribute (plain string setters)
STRING_COLUMNS: Dict[str, str] = {
    'name': 'name',
    'sku': 'sku',
    'brand': 'brand',
    'category': 'category',
    'features': 'features',
    'notes': 'notes',
    'imageurl': 'image_url',
    'material': 'material',
    'color': 'color',
    'eancode': 'ean_code',
}
STRING_COLUMNS.update({attr.replace('_', ''): attr for attr in MARKETPLACE_BARCODE_FIELDS})
STRING_COLUMNS.update({attr.replace('_', ''): attr for attr in FEATURE_FIELDS})

FLOAT_COLUMNS: Dict[str, str] = {attr: attr for attr in FLOAT_FIELDS}
INT_COLUMNS: Dict[str, str] = {'warrantymonths': 'warranty_months'}
DATE_COLUMNS: Dict[str, str] = {'createddate': 'created_date', 'updateddate': 'updated_date'}

# numbered family prefix -> (list attribute, max slots)
NUMBERED_COLUMNS: Dict[str, Tuple[str, int]] = {
    'logobarcode': ('logo_barcodes', 10),
    'productimage': ('image_urls', 10),
    'marketplaceimage': ('marketplace_image_urls', 10),
    'video': ('video_urls', 5),
}

DESCRIPTION_COLUMNS = ('descriptionhtml', 'descriptionplain', 'description')
ARCHIVE_COLUMNS = ('archived', 'active')


def split_numbered(canonical: str) -> Optional[Tuple[str, int]]:
    """'productimage3' -> ('image_urls', 2); None when not a numbered family field."""
    for prefix, (attr, limit) in NUMBERED_COLUMNS.items():
        if canonical.startswith(prefix):
            suffix = canonical[len(prefix):]
            if suffix.isdigit():
                index = int(suffix) - 1
                if 0 <= index < limit:
                    return attr, index
    return None


def has_archive_column(canonical_headers: Sequence[str]) -> bool:
    return any(h in ARCHIVE_COLUMNS for h in canonical_headers)


def _text(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, float) and value != value:  # NaN from pandas
        return ''
    return str(value).strip()


def parse_row(canonical_headers: Sequence[str], raw_values: Sequence[Any],
              source_row: Optional[int] = None) -> Optional[ProductRecord]:
    """
    Build a draft record from one row.
    Returns None when the row has no name.
    """
    record = ProductRecord(source_row=source_row)
    descriptions: Dict[str, str] = {}

    for i, header in enumerate(canonical_headers):
        if i >= len(raw_values) or not header:
            continue
        value = _text(raw_values[i])
        if not value:
            continue

        try:
            if header in STRING_COLUMNS:
                setattr(record, STRING_COLUMNS[header], value)
            elif header in DESCRIPTION_COLUMNS:
                descriptions[header] = value
            elif header in FLOAT_COLUMNS:
                setattr(record, FLOAT_COLUMNS[header], to_float(value))
            elif header in INT_COLUMNS:
                setattr(record, INT_COLUMNS[header], to_int(value))
            elif header == 'id':
                record.id = max(to_int(value), 0)
            elif header == 'archived':
                record.is_archived = is_truthy(value, ARCHIVED_TOKENS)
            elif header == 'active':
                record.is_archived = not is_truthy(value, TRUTHY_TOKENS)
            elif header in DATE_COLUMNS:
                parsed = parse_datetime(value)
                if parsed is None:
                    logger.debug(f"Row {source_row}: invalid date '{value}' for {header}")
                setattr(record, DATE_COLUMNS[header], parsed)
            else:
                numbered = split_numbered(header)
                if numbered:
                    attr, index = numbered
                    set_indexed(getattr(record, attr), index, value)
        except Exception as e:
            # A malformed cell never aborts the row
            logger.debug(f"Row {source_row}: value '{value}' skipped for {header}: {e}")

    for key in DESCRIPTION_COLUMNS:
        if descriptions.get(key):
            record.description = descriptions[key]
            break

    if not record.name.strip():
        return None

    record.normalize()
    primary = first_non_empty(record.image_urls)
    if primary:
        record.image_url = primary
    return record


def parse_rows(raw_headers: Sequence[Any], rows: Sequence[Sequence[Any]],
               first_row_number: int = 1) -> Tuple[List[ProductRecord], int]:
    """Parse many rows that share one header line. Returns (records, skipped)."""
    canonical = normalize_headers(raw_headers)
    records: List[ProductRecord] = []
    skipped = 0
    for offset, values in enumerate(rows):
        if not any(_text(v) for v in values):
            continue
        record = parse_row(canonical, values, source_row=first_row_number + offset)
        if record is None:
            skipped += 1
            continue
        records.append(record)
    return records, skipped


class FormatError(ValueError):
    """The payload as a whole cannot be read (empty, malformed, wrong format)."""


@dataclass
class ParsedFile:
    """Output of a format adapter: draft records plus what was dropped on the way."""
    records: List[ProductRecord] = field(default_factory=list)
    skipped_count: int = 0
    errors: List[str] = field(default_factory=list)
    has_archive_column: bool = False
    unmapped_headers: List[str] = field(default_factory=list)


def parse_table(raw_headers: Sequence[Any], rows: Sequence[Sequence[Any]],
                first_row_number: int = 2) -> ParsedFile:
    """CSV / Excel: one header line shared by every data row."""
    headers = ['' if h is None else str(h) for h in raw_headers]
    records, skipped = parse_rows(headers, rows, first_row_number=first_row_number)
    unmapped = unmapped_headers(headers)
    if unmapped:
        logger.info(f"Unrecognized columns ignored: {', '.join(unmapped)}")
    return ParsedFile(
        records=records,
        skipped_count=skipped,
        has_archive_column=has_archive_column(normalize_headers(headers)),
        unmapped_headers=unmapped,
    )


def _scalar_text(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, dict):
        # xmltodict puts element text under '#text' when attributes are present
        return _scalar_text(value.get('#text'))
    return str(value)


def flatten_item(item: Dict[str, Any]) -> Tuple[List[str], List[str]]:
    """
    One JSON object / XML element -> (headers, values).
    List values (imageUrls, logoBarcodes, <ImageUrls><Url/>...) become numbered columns.
    """
    headers: List[str] = []
    values: List[str] = []
    for key, value in item.items():
        if not key or str(key).startswith('@'):
            continue
        list_prefix = LIST_HEADER_PREFIXES.get(fold_header(key))
        if value is None and list_prefix:
            continue
        if list_prefix == 'logobarcode' and isinstance(value, str) and fold_header(key) != 'logobarcode':
            value = decode_logo_barcodes(value)
        if isinstance(value, dict) and '#text' not in value:
            # Container element: <ImageUrls><Url>a</Url><Url>b</Url></ImageUrls>
            inner = [v for k, v in value.items() if not str(k).startswith('@')]
            value = inner[0] if len(inner) == 1 else inner
            if not isinstance(value, list):
                value = [value]
        if isinstance(value, list):
            prefix = list_prefix
            if not prefix:
                logger.debug(f"List field ignored: {key}")
                continue
            for i, entry in enumerate(value, start=1):
                headers.append(f"{prefix}{i}")
                values.append(_scalar_text(entry))
            continue
        headers.append(str(key))
        values.append(_scalar_text(value))
    return headers, values


def parse_items(items: Sequence[Any]) -> ParsedFile:
    """JSON / XML: every item carries its own field names."""
    parsed = ParsedFile()
    unmapped = set()
    for number, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            parsed.skipped_count += 1
            parsed.errors.append(f"Row {number}: not an object, skipped")
            continue
        headers, values = flatten_item(item)
        canonical = normalize_headers(headers)
        if has_archive_column(canonical):
            parsed.has_archive_column = True
        unmapped.update(unmapped_headers(headers))
        record = parse_row(canonical, values, source_row=number)
        if record is None:
            parsed.skipped_count += 1
            continue
        parsed.records.append(record)
    parsed.unmapped_headers = sorted(unmapped)
    if parsed.unmapped_headers:
        logger.info(f"Unrecognized fields ignored: {', '.join(parsed.unmapped_headers)}")
    return parsed
