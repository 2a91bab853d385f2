"""
Export column catalog
- Fixed list of exportable columns grouped by category, with default selection and order
- Value extraction for one column of one record
- HTML description clean-up / plain-text conversion
"""
import html
import logging
import re
from collections import OrderedDict
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional

from catalog.models.record import ProductRecord, MARKETPLACE_BARCODE_FIELDS, FEATURE_FIELDS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportColumn:
    property_name: str
    display_name: str
    category: str
    is_selected: bool = False
    is_required: bool = False
    data_type: str = 'string'
    order: int = 0

    def to_dict(self):
        return {
            'property_name': self.property_name,
            'display_name': self.display_name,
            'category': self.category,
            'is_selected': self.is_selected,
            'is_required': self.is_required,
            'data_type': self.data_type,
            'order': self.order,
        }


_MARKETPLACE_BARCODE_NAMES = {
    'trendyol_barcode': "Trendyol Barkod",
    'hepsiburada_barcode': "Hepsiburada Barkod",
    'hepsiburada_seller_stock_code': "Hepsiburada Satıcı Stok Kodu",
    'koctas_barcode': "Koçtaş Barkod",
    'koctas_istanbul_barcode': "Koçtaş İstanbul Barkod",
    'koctas_ean_barcode': "Koçtaş EAN Barkod",
    'koctas_ean_istanbul_barcode': "Koçtaş EAN İstanbul Barkod",
    'hepsiburada_tedarik_barcode': "Hepsiburada Tedarik Barkod",
    'pttavm_barcode': "PTT AVM Barkod",
    'ptt_urun_stok_kodu': "PTT Ürün ID",
    'pazarama_barcode': "Pazarama Barkod",
    'haceyapi_barcode': "Haceyapı Barkod",
    'amazon_barcode': "Amazon Barkod",
    'n11_catalog_id': "N11 Katalog ID",
    'n11_product_code': "N11 Ürün Kodu",
    'entegra_urun_id': "Entegra Ürün ID",
    'entegra_urun_kodu': "Entegra Ürün Kodu",
    'entegra_barkod': "Entegra Barkod",
    'spare_barcode_1': "Yedek Barkod 1",
    'spare_barcode_2': "Yedek Barkod 2",
    'spare_barcode_3': "Yedek Barkod 3",
    'spare_barcode_4': "Yedek Barkod 4",
}

_FEATURE_NAMES = {
    'klozet_kanal_yapisi': "Klozet Kanal Yapısı",
    'klozet_tipi': "Klozet Tipi",
    'klozet_kapak_cinsi': "Klozet Kapak Cinsi",
    'klozet_montaj_tipi': "Klozet Montaj Tipi",
    'lavabo_su_tasma_deligi': "Lavabo Su Taşma Deliği",
    'lavabo_armatur_deligi': "Lavabo Armatur Deliği",
    'lavabo_tipi': "Lavabo Tipi",
    'lavabo_ozelligi': "Lavabo Özelliği",
    'batarya_cikis_ucu_uzunlugu': "Batarya Çıkış Ucu Uzunluğu",
    'batarya_yuksekligi': "Batarya Yüksekliği",
}


def _build_columns() -> List[ExportColumn]:
    columns = [
        # Tarihler
        ExportColumn('created_date', "Oluşturma Tarihi", "Tarihler", data_type='datetime', order=1),
        ExportColumn('updated_date', "Güncelleme Tarihi", "Tarihler", data_type='datetime', order=2),
        # Statü
        ExportColumn('is_archived', "Arşivlenmiş", "Statü", data_type='bool', order=11),
        # Temel Bilgiler
        ExportColumn('ean_code', "EAN Kodu", "Temel Bilgiler", is_selected=True, order=20),
        ExportColumn('id', "ID", "Temel Bilgiler", is_selected=True, is_required=True, data_type='int', order=21),
        ExportColumn('name', "Ürün Adı", "Temel Bilgiler", is_selected=True, is_required=True, order=22),
        ExportColumn('sku', "SKU", "Temel Bilgiler", is_selected=True, order=23),
        ExportColumn('brand', "Marka", "Temel Bilgiler", is_selected=True, order=24),
        ExportColumn('category', "Kategori", "Temel Bilgiler", is_selected=True, order=25),
        # Açıklama ve Notlar
        ExportColumn('description_html', "Açıklama (HTML)", "Açıklama ve Notlar", order=30),
        ExportColumn('description_plain', "Açıklama (Düz Metin)", "Açıklama ve Notlar", order=31),
        ExportColumn('features', "Özellikler", "Açıklama ve Notlar", order=32),
        ExportColumn('notes', "Notlar", "Açıklama ve Notlar", order=33),
        # Genel Özellikler
        ExportColumn('weight', "Ağırlık (kg)", "Genel Özellikler", data_type='decimal', order=40),
        ExportColumn('desi', "Desi", "Genel Özellikler", is_selected=True, data_type='decimal', order=41),
        ExportColumn('width', "Genişlik (cm)", "Genel Özellikler", data_type='decimal', order=42),
        ExportColumn('height', "Yükseklik (cm)", "Genel Özellikler", data_type='decimal', order=43),
        ExportColumn('depth', "En (cm)", "Genel Özellikler", data_type='decimal', order=44),
        ExportColumn('length', "Uzunluk (cm)", "Genel Özellikler", data_type='decimal', order=45),
        ExportColumn('material', "Malzeme", "Genel Özellikler", order=46),
        ExportColumn('color', "Renk", "Genel Özellikler", order=47),
        ExportColumn('warranty_months', "Garanti", "Genel Özellikler", data_type='int', order=48),
    ]

    for order, prop in enumerate(FEATURE_FIELDS, start=50):
        columns.append(ExportColumn(prop, _FEATURE_NAMES[prop], "Ürün Özellikleri", order=order))

    for order, prop in enumerate(MARKETPLACE_BARCODE_FIELDS, start=60):
        columns.append(ExportColumn(prop, _MARKETPLACE_BARCODE_NAMES[prop], "Pazaryeri Barkodları",
                                    is_selected=True, order=order))

    for i in range(1, 11):
        columns.append(ExportColumn(f"logo_barcode_{i}", f"Logo Barkodu {i}", "Logo Barkodları",
                                    is_selected=True, order=90 + i))
    for i in range(1, 11):
        columns.append(ExportColumn(f"product_image_{i}", f"Ürün Görseli {i}", "Ürün Görselleri",
                                    order=100 + i))
    for i in range(1, 11):
        columns.append(ExportColumn(f"marketplace_image_{i}", f"Pazaryeri Görseli {i}", "Pazaryeri Görselleri",
                                    order=110 + i))
    for i in range(1, 6):
        columns.append(ExportColumn(f"video_{i}", f"Video {i}", "Videolar", order=120 + i))
    return columns


_COLUMNS = tuple(_build_columns())
_COLUMNS_BY_NAME = {c.property_name: c for c in _COLUMNS}

_NUMBERED_LISTS = (
    ('logo_barcode_', 'logo_barcodes'),
    ('product_image_', 'image_urls'),
    ('marketplace_image_', 'marketplace_image_urls'),
    ('video_', 'video_urls'),
)


def get_available_columns() -> List[ExportColumn]:
    return sorted(_COLUMNS, key=lambda c: c.order)


def get_default_columns() -> List[ExportColumn]:
    return [c for c in get_available_columns() if c.is_selected or c.is_required]


def get_columns_by_category() -> 'OrderedDict[str, List[ExportColumn]]':
    grouped: 'OrderedDict[str, List[ExportColumn]]' = OrderedDict()
    for column in get_available_columns():
        grouped.setdefault(column.category, []).append(column)
    return grouped


def get_column(property_name: str) -> Optional[ExportColumn]:
    return _COLUMNS_BY_NAME.get(property_name)


def resolve_columns(names: Optional[Iterable[str]]) -> List[ExportColumn]:
    """
    Selected property names -> ordered columns. Unknown names are dropped,
    required columns are always included; empty selection means the defaults.
    """
    wanted = {n.strip() for n in (names or []) if n and n.strip()}
    if not wanted:
        return get_default_columns()
    unknown = wanted - set(_COLUMNS_BY_NAME)
    if unknown:
        logger.warning(f"Unknown export columns ignored: {', '.join(sorted(unknown))}")
    return [replace(c, is_selected=True) for c in get_available_columns()
            if c.property_name in wanted or c.is_required]


def get_column_value(record: ProductRecord, property_name: str) -> Any:
    """Raw value of one column (str / number / bool / datetime)."""
    if property_name == 'description_html':
        return clean_html_for_export(record.description)
    if property_name == 'description_plain':
        return html_to_plain_text(record.description)
    for prefix, attr in _NUMBERED_LISTS:
        if property_name.startswith(prefix):
            suffix = property_name[len(prefix):]
            if suffix.isdigit():
                values = getattr(record, attr)
                index = int(suffix) - 1
                return values[index] if 0 <= index < len(values) else ''
    value = getattr(record, property_name, '')
    return '' if value is None else value


# --- HTML helpers ------------------------------------------------------------

_RE_FLAGS = re.IGNORECASE
_INDENT_RE = re.compile(r'<(?:p|li)\b[^>]*class="[^"]*?(?:ql-indent-|indent-level-)(\d+)[^"]*"[^>]*>', re.IGNORECASE)


def _strip_word_markup(text: str) -> str:
    # Microsoft Word paste leftovers
    text = re.sub(r'class="MsoNormal"', '', text, flags=_RE_FLAGS)
    text = re.sub(r'style="[^"]*mso-[^"]*"', '', text, flags=_RE_FLAGS)
    # Nested paragraphs collapse to one
    text = re.sub(r'<p[^>]*>(\s*<p[^>]*>)+', '<p>', text, flags=_RE_FLAGS)
    text = re.sub(r'(</p>\s*)+</p>', '</p>', text, flags=_RE_FLAGS)
    # Empty paragraphs
    text = re.sub(r'<p[^>]*>\s*</p>', '', text, flags=_RE_FLAGS)
    # Lists do not belong inside paragraphs
    text = re.sub(r'<p[^>]*>(\s*<ul>)', r'\1', text, flags=_RE_FLAGS)
    text = re.sub(r'(</ul>\s*)</p>', r'\1', text, flags=_RE_FLAGS)
    return text


def _indent_classes_to_text(text: str) -> str:
    """Editor indent classes (ql-indent-N / indent-level-N) become leading non-breaking spaces."""
    def repl(match):
        return '&nbsp;' * (int(match.group(1)) * 4) + match.group(0)
    return _INDENT_RE.sub(repl, text)


def html_to_plain_text(content: str) -> str:
    if not content:
        return ''
    try:
        text = _strip_word_markup(content)
        text = _indent_classes_to_text(text)
        text = re.sub(r'<li[^>]*>', '• ', text, flags=_RE_FLAGS)
        text = re.sub(r'</li>', '\n', text, flags=_RE_FLAGS)
        text = re.sub(r'</p>\s*<p[^>]*>', '\n\n', text, flags=_RE_FLAGS)
        text = re.sub(r'<p[^>]*>', '', text, flags=_RE_FLAGS)
        text = re.sub(r'</p>', '\n', text, flags=_RE_FLAGS)
        text = re.sub(r'<br\s*/?>\s*', '\n', text, flags=_RE_FLAGS)
        text = re.sub(r'<[^>]+>', '', text)
        text = re.sub(r'\n\s*\n', '\n\n', text)
        text = re.sub(r'^[ \t]+|[ \t]+$', '', text, flags=re.MULTILINE)
        text = html.unescape(text)
        return text.strip()
    except Exception as e:
        logger.warning(f"HTML to plain text conversion failed, falling back to tag strip: {e}")
        text = html.unescape(re.sub(r'<[^>]*>', '', content))
        return re.sub(r'\s+', ' ', text).strip()


def clean_html_for_export(content: str) -> str:
    if not content:
        return ''
    text = _strip_word_markup(content)
    text = re.sub(r'\s+', ' ', text)
    text = re.sub(r'>\s+<', '><', text)
    text = re.sub(r'\s*style="[^"]*"', '', text, flags=_RE_FLAGS)
    return text.strip()


def column_names(columns: Iterable[ExportColumn]) -> List[str]:
    return [c.display_name for c in columns]


def build_row(record: ProductRecord, columns: Iterable[ExportColumn], formatter=None) -> Dict[str, Any]:
    """property name -> value for one record. formatter(value, column) turns values into text."""
    row = {}
    for column in columns:
        value = get_column_value(record, column.property_name)
        row[column.property_name] = formatter(value, column) if formatter else value
    return row
