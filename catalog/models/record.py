"""
In-memory product record used by the import/export engine.

The SQLAlchemy ``Product`` model is the storage shape; ``ProductRecord`` is what
parsers, the matcher and the merge engine pass around. Conversion happens at the
persistence boundary (``Product.to_record`` / ``Product.apply_record``).
"""
import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from catalog.utils.helpers import format_datetime, to_camel

MAX_IMAGES = 10
MAX_MARKETPLACE_IMAGES = 10
MAX_VIDEOS = 5
MAX_LOGO_BARCODES = 10

# Named marketplace barcode fields, in catalog order
MARKETPLACE_BARCODE_FIELDS = (
    'trendyol_barcode',
    'hepsiburada_barcode',
    'hepsiburada_seller_stock_code',
    'koctas_barcode',
    'koctas_istanbul_barcode',
    'koctas_ean_barcode',
    'koctas_ean_istanbul_barcode',
    'hepsiburada_tedarik_barcode',
    'pttavm_barcode',
    'ptt_urun_stok_kodu',
    'pazarama_barcode',
    'haceyapi_barcode',
    'amazon_barcode',
    'n11_catalog_id',
    'n11_product_code',
    'entegra_urun_id',
    'entegra_urun_kodu',
    'entegra_barkod',
    'spare_barcode_1',
    'spare_barcode_2',
    'spare_barcode_3',
    'spare_barcode_4',
)

# Sanitary-ware attributes (toilet / basin / faucet)
FEATURE_FIELDS = (
    'klozet_kanal_yapisi',
    'klozet_tipi',
    'klozet_kapak_cinsi',
    'klozet_montaj_tipi',
    'lavabo_su_tasma_deligi',
    'lavabo_armatur_deligi',
    'lavabo_tipi',
    'lavabo_ozelligi',
    'batarya_cikis_ucu_uzunlugu',
    'batarya_yuksekligi',
)

STRING_FIELDS = (
    'name',
    'sku',
    'brand',
    'category',
    'description',
    'features',
    'notes',
    'image_url',
    'material',
    'color',
    'ean_code',
) + MARKETPLACE_BARCODE_FIELDS + FEATURE_FIELDS

FLOAT_FIELDS = ('weight', 'desi', 'width', 'height', 'depth', 'length')
INT_FIELDS = ('warranty_months',)
NUMERIC_FIELDS = FLOAT_FIELDS + INT_FIELDS

# list field -> maximum length
LIST_FIELDS = {
    'image_urls': MAX_IMAGES,
    'marketplace_image_urls': MAX_MARKETPLACE_IMAGES,
    'video_urls': MAX_VIDEOS,
    'logo_barcodes': MAX_LOGO_BARCODES,
}


@dataclass
class ProductRecord:
    id: int = 0
    name: str = ''
    sku: str = ''
    brand: str = ''
    category: str = ''
    category_id: Optional[int] = None
    description: str = ''
    features: str = ''
    notes: str = ''
    image_url: str = ''

    weight: float = 0.0
    desi: float = 0.0
    width: float = 0.0
    height: float = 0.0
    depth: float = 0.0
    length: float = 0.0
    warranty_months: int = 0
    material: str = ''
    color: str = ''
    ean_code: str = ''

    trendyol_barcode: str = ''
    hepsiburada_barcode: str = ''
    hepsiburada_seller_stock_code: str = ''
    koctas_barcode: str = ''
    koctas_istanbul_barcode: str = ''
    koctas_ean_barcode: str = ''
    koctas_ean_istanbul_barcode: str = ''
    hepsiburada_tedarik_barcode: str = ''
    pttavm_barcode: str = ''
    ptt_urun_stok_kodu: str = ''
    pazarama_barcode: str = ''
    haceyapi_barcode: str = ''
    amazon_barcode: str = ''
    n11_catalog_id: str = ''
    n11_product_code: str = ''
    entegra_urun_id: str = ''
    entegra_urun_kodu: str = ''
    entegra_barkod: str = ''
    spare_barcode_1: str = ''
    spare_barcode_2: str = ''
    spare_barcode_3: str = ''
    spare_barcode_4: str = ''

    klozet_kanal_yapisi: str = ''
    klozet_tipi: str = ''
    klozet_kapak_cinsi: str = ''
    klozet_montaj_tipi: str = ''
    lavabo_su_tasma_deligi: str = ''
    lavabo_armatur_deligi: str = ''
    lavabo_tipi: str = ''
    lavabo_ozelligi: str = ''
    batarya_cikis_ucu_uzunlugu: str = ''
    batarya_yuksekligi: str = ''

    logo_barcodes: List[str] = field(default_factory=list)
    image_urls: List[str] = field(default_factory=list)
    marketplace_image_urls: List[str] = field(default_factory=list)
    video_urls: List[str] = field(default_factory=list)

    is_archived: bool = False
    created_date: Optional[datetime] = None
    updated_date: Optional[datetime] = None

    # 1-based source row, set by the format adapters; never persisted
    source_row: Optional[int] = field(default=None, compare=False, repr=False)

    def normalize(self) -> 'ProductRecord':
        """Blank out None strings, clamp negative numbers and cap list sizes."""
        for name in STRING_FIELDS:
            value = getattr(self, name)
            setattr(self, name, '' if value is None else str(value))
        for name in FLOAT_FIELDS:
            value = getattr(self, name) or 0.0
            setattr(self, name, max(float(value), 0.0))
        for name in INT_FIELDS:
            value = getattr(self, name) or 0
            setattr(self, name, max(int(value), 0))
        for name, limit in LIST_FIELDS.items():
            values = getattr(self, name) or []
            setattr(self, name, ['' if v is None else str(v) for v in values][:limit])
        self.id = int(self.id or 0)
        self.is_archived = bool(self.is_archived)
        return self

    def copy(self) -> 'ProductRecord':
        return copy.deepcopy(self)

    @property
    def label(self) -> str:
        """Name used in error messages, falling back to the id."""
        if self.name and self.name.strip():
            return self.name.strip()
        return str(self.id) if self.id else '?'

    def to_dict(self) -> Dict[str, Any]:
        """camelCase payload used by the JSON API and the JSON export."""
        data: Dict[str, Any] = {'id': self.id}
        for name in STRING_FIELDS + NUMERIC_FIELDS:
            data[to_camel(name)] = getattr(self, name)
        data.update({
            'categoryId': self.category_id,
            'logoBarcodes': list(self.logo_barcodes),
            'imageUrls': list(self.image_urls),
            'marketplaceImageUrls': list(self.marketplace_image_urls),
            'videoUrls': list(self.video_urls),
            'isArchived': self.is_archived,
            'createdDate': format_datetime(self.created_date),
            'updatedDate': format_datetime(self.updated_date),
        })
        return data
