import json
from datetime import datetime
from catalog import db
from catalog.models.record import (
    ProductRecord, STRING_FIELDS, NUMERIC_FIELDS,
)
from catalog.utils.helpers import (
    encode_logo_barcodes, decode_logo_barcodes,
)


def _load_list(raw):
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except ValueError:
        # Legacy rows stored lists joined with '|'
        return [part for part in str(raw).split('|')]
    return [str(v) for v in data] if isinstance(data, list) else []


class Product(db.Model):
    __tablename__ = "products"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(500), nullable=False, index=True)
    sku = db.Column(db.String(100), nullable=True, index=True)
    brand = db.Column(db.String(200), nullable=True, index=True)
    category = db.Column(db.String(100), nullable=True)          # Category display name
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id'), nullable=True, index=True)
    description = db.Column(db.Text, nullable=True)                # HTML
    features = db.Column(db.Text, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.String(1000), nullable=True)          # Primary image

    weight = db.Column(db.Float, default=0.0)
    desi = db.Column(db.Float, default=0.0)
    width = db.Column(db.Float, default=0.0)
    height = db.Column(db.Float, default=0.0)
    depth = db.Column(db.Float, default=0.0)
    length = db.Column(db.Float, default=0.0)
    warranty_months = db.Column(db.Integer, default=0)
    material = db.Column(db.String(200), nullable=True)
    color = db.Column(db.String(100), nullable=True)
    ean_code = db.Column(db.String(50), nullable=True, index=True)

    # Marketplace barcodes
    trendyol_barcode = db.Column(db.String(100), nullable=True)
    hepsiburada_barcode = db.Column(db.String(100), nullable=True)
    hepsiburada_seller_stock_code = db.Column(db.String(100), nullable=True)
    koctas_barcode = db.Column(db.String(100), nullable=True)
    koctas_istanbul_barcode = db.Column(db.String(100), nullable=True)
    koctas_ean_barcode = db.Column(db.String(100), nullable=True)
    koctas_ean_istanbul_barcode = db.Column(db.String(100), nullable=True)
    hepsiburada_tedarik_barcode = db.Column(db.String(100), nullable=True)
    pttavm_barcode = db.Column(db.String(100), nullable=True)
    ptt_urun_stok_kodu = db.Column(db.String(100), nullable=True)
    pazarama_barcode = db.Column(db.String(100), nullable=True)
    haceyapi_barcode = db.Column(db.String(100), nullable=True)
    amazon_barcode = db.Column(db.String(100), nullable=True)
    n11_catalog_id = db.Column(db.String(100), nullable=True)
    n11_product_code = db.Column(db.String(100), nullable=True)
    entegra_urun_id = db.Column(db.String(100), nullable=True)
    entegra_urun_kodu = db.Column(db.String(100), nullable=True)
    entegra_barkod = db.Column(db.String(100), nullable=True)
    spare_barcode_1 = db.Column(db.String(100), nullable=True)
    spare_barcode_2 = db.Column(db.String(100), nullable=True)
    spare_barcode_3 = db.Column(db.String(100), nullable=True)
    spare_barcode_4 = db.Column(db.String(100), nullable=True)
    logo_barcodes = db.Column(db.Text, nullable=True)              # Comma joined, positions kept

    # Sanitary-ware attributes
    klozet_kanal_yapisi = db.Column(db.String(200), nullable=True)
    klozet_tipi = db.Column(db.String(200), nullable=True)
    klozet_kapak_cinsi = db.Column(db.String(200), nullable=True)
    klozet_montaj_tipi = db.Column(db.String(200), nullable=True)
    lavabo_su_tasma_deligi = db.Column(db.String(200), nullable=True)
    lavabo_armatur_deligi = db.Column(db.String(200), nullable=True)
    lavabo_tipi = db.Column(db.String(200), nullable=True)
    lavabo_ozelligi = db.Column(db.String(200), nullable=True)
    batarya_cikis_ucu_uzunlugu = db.Column(db.String(200), nullable=True)
    batarya_yuksekligi = db.Column(db.String(200), nullable=True)

    images_json = db.Column(db.Text, nullable=True)                # JSON string list of urls
    marketplace_images_json = db.Column(db.Text, nullable=True)
    videos_json = db.Column(db.Text, nullable=True)

    is_archived = db.Column(db.Boolean, default=False, index=True)
    created_date = db.Column(db.DateTime, default=datetime.now)
    updated_date = db.Column(db.DateTime, default=datetime.now)

    @property
    def get_images(self):
        return _load_list(self.images_json)

    @property
    def get_marketplace_images(self):
        return _load_list(self.marketplace_images_json)

    @property
    def get_videos(self):
        return _load_list(self.videos_json)

    def to_record(self) -> ProductRecord:
        record = ProductRecord(
            id=self.id or 0,
            category_id=self.category_id,
            is_archived=bool(self.is_archived),
            created_date=self.created_date,
            updated_date=self.updated_date,
            logo_barcodes=decode_logo_barcodes(self.logo_barcodes),
            image_urls=self.get_images,
            marketplace_image_urls=self.get_marketplace_images,
            video_urls=self.get_videos,
        )
        for name in STRING_FIELDS + NUMERIC_FIELDS:
            setattr(record, name, getattr(self, name))
        return record.normalize()

    def apply_record(self, record: ProductRecord):
        """Copy every persisted field of record onto this row."""
        record.normalize()
        for name in STRING_FIELDS + NUMERIC_FIELDS:
            setattr(self, name, getattr(record, name))
        self.category_id = record.category_id
        self.is_archived = record.is_archived
        self.logo_barcodes = encode_logo_barcodes(record.logo_barcodes)
        self.images_json = json.dumps(record.image_urls, ensure_ascii=False)
        self.marketplace_images_json = json.dumps(record.marketplace_image_urls, ensure_ascii=False)
        self.videos_json = json.dumps(record.video_urls, ensure_ascii=False)
        if record.created_date:
            self.created_date = record.created_date
        self.updated_date = record.updated_date or datetime.now()

    def to_dict(self):
        return self.to_record().to_dict()

    @classmethod
    def get_all(cls, include_archived=True):
        query = cls.query
        if not include_archived:
            query = query.filter_by(is_archived=False)
        return query.order_by(cls.id.asc()).all()
