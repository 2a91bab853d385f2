"""
Export Service
- Full catalog exports (XML / JSON / CSV / Excel)
- Custom column exports driven by the export column catalog
"""
import json
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from catalog.models.record import (
    ProductRecord, STRING_FIELDS, NUMERIC_FIELDS, LIST_FIELDS,
)
from catalog.services import excel_service, xml_service
from catalog.services.export_column_service import (
    ExportColumn, get_available_columns, resolve_columns, build_row, column_names,
)
from catalog.utils.helpers import format_datetime, format_decimal, to_camel, to_pascal

logger = logging.getLogger(__name__)

EXPORT_FORMATS = {
    'xml': ('application/xml', 'xml'),
    'json': ('application/json', 'json'),
    'csv': ('text/csv', 'csv'),
    'excel': ('application/vnd.openxmlformats-officedocument.spreadsheetml.sheet', 'xlsx'),
}

# list field -> singular XML element name used for numbered children
_XML_LIST_ELEMENTS = {
    'image_urls': 'ImageUrl',
    'marketplace_image_urls': 'MarketplaceImageUrl',
    'video_urls': 'VideoUrl',
    'logo_barcodes': 'LogoBarcode',
}


def generate_filename(prefix: str, fmt: str) -> str:
    ext = EXPORT_FORMATS.get(fmt, (None, fmt))[1]
    return f"{prefix}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.{ext}"


def format_cell(value: Any, column: Optional[ExportColumn] = None) -> str:
    """Text form used by CSV / XML: Evet/Hayır booleans, invariant decimals, fixed date format."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'Evet' if value else 'Hayır'
    if isinstance(value, datetime):
        return format_datetime(value)
    if isinstance(value, (int, float)):
        return format_decimal(value)
    return str(value)


# --- full exports --------------------------------------------------------------

def _xml_item(record: ProductRecord) -> Dict[str, Any]:
    item: Dict[str, Any] = {'Id': str(record.id)}
    for name in STRING_FIELDS:
        item[to_pascal(name)] = getattr(record, name) or ''
    for name in NUMERIC_FIELDS:
        item[to_pascal(name)] = format_decimal(getattr(record, name))
    item['CategoryId'] = '' if record.category_id is None else str(record.category_id)
    for name in LIST_FIELDS:
        element = _XML_LIST_ELEMENTS[name]
        for i, value in enumerate(getattr(record, name), start=1):
            item[f"{element}{i}"] = value
    item['IsArchived'] = 'true' if record.is_archived else 'false'
    item['CreatedDate'] = format_datetime(record.created_date)
    item['UpdatedDate'] = format_datetime(record.updated_date)
    return item


def export_xml(records: Sequence[ProductRecord]) -> str:
    return xml_service.write_xml([_xml_item(r) for r in records])


def export_json(records: Sequence[ProductRecord]) -> str:
    return json.dumps([r.to_dict() for r in records], ensure_ascii=False, indent=2)


def export_csv(records: Sequence[ProductRecord]) -> str:
    return export_custom(records, [c.property_name for c in get_available_columns()], 'csv')[0]


def export_excel(records: Sequence[ProductRecord]) -> bytes:
    return export_custom(records, [c.property_name for c in get_available_columns()], 'excel')[0]


def export_full(records: Sequence[ProductRecord], fmt: str) -> Tuple[Any, str, str]:
    """Returns (content, mimetype, filename)."""
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Desteklenmeyen dışa aktarma formatı: {fmt}")
    exporters = {
        'xml': export_xml,
        'json': export_json,
        'csv': export_csv,
        'excel': export_excel,
    }
    content = exporters[fmt](records)
    logger.info(f"Export ({fmt}): {len(records)} products")
    return content, EXPORT_FORMATS[fmt][0], generate_filename('urunler', fmt)


# --- custom column exports ------------------------------------------------------

def _json_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_datetime(value)
    return value


def _excel_cell(value: Any, column: Optional[ExportColumn] = None) -> Any:
    # Numbers stay numeric in the workbook
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return format_cell(value, column)


def export_custom(records: Sequence[ProductRecord], selected: Optional[Iterable[str]], fmt: str) -> Tuple[Any, str, str]:
    """Export only the selected columns. Returns (content, mimetype, filename)."""
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Desteklenmeyen dışa aktarma formatı: {fmt}")
    columns = resolve_columns(selected)

    if fmt == 'json':
        rows = []
        for record in records:
            raw = build_row(record, columns)
            rows.append({to_camel(c.property_name): _json_value(raw[c.property_name]) for c in columns})
        content = json.dumps(rows, ensure_ascii=False, indent=2)
    elif fmt == 'xml':
        rows = [build_row(r, columns, format_cell) for r in records]
        tags = [to_pascal(c.property_name) for c in columns]
        renamed = [{to_pascal(k): v for k, v in row.items()} for row in rows]
        content = xml_service.write_custom_xml(renamed, tags)
    else:
        headers = column_names(columns)
        formatter = format_cell if fmt == 'csv' else _excel_cell
        rows = []
        for record in records:
            raw = build_row(record, columns, formatter)
            rows.append({c.display_name: raw[c.property_name] for c in columns})
        if fmt == 'csv':
            content = excel_service.write_csv(rows, headers)
        else:
            content = excel_service.write_excel(rows, headers)

    logger.info(f"Custom export ({fmt}): {len(records)} products, {len(columns)} columns")
    return content, EXPORT_FORMATS[fmt][0], generate_filename('urunler_ozel', fmt)


def import_template_columns() -> List[str]:
    """Header row of the import template: every catalog column except the computed plain-text description."""
    return [c.display_name for c in get_available_columns() if c.property_name != 'description_plain']
