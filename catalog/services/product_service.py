"""
Product persistence and catalog queries.
- ProductPersistence: the narrow store interface the import engine talks to
- Listing / filtering / CRUD / bulk operations used by the routes
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from flask import current_app, has_app_context

from catalog import db
from catalog.models import Product, ProductRecord
from catalog.models.record import STRING_FIELDS, FLOAT_FIELDS, INT_FIELDS, MARKETPLACE_BARCODE_FIELDS
from catalog.services import cache_service, category_service
from catalog.services.validation_service import ensure_valid
from catalog.utils.helpers import (
    fold_turkish, to_camel, to_float, to_int, is_truthy, parse_datetime, decode_logo_barcodes,
)

logger = logging.getLogger(__name__)

SEARCH_FIELDS = (
    'name', 'description', 'sku', 'brand', 'category', 'features',
    'material', 'color', 'notes', 'ean_code',
) + MARKETPLACE_BARCODE_FIELDS


class ProductPersistence:
    """Store used by the import engine: get_all / add / update / get_or_create_category_id."""

    def get_all(self) -> List[ProductRecord]:
        return [p.to_record() for p in Product.get_all()]

    def add(self, record: ProductRecord) -> ProductRecord:
        product = Product()
        product.apply_record(record)
        try:
            db.session.add(product)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        cache_service.invalidate('brands')
        return product.to_record()

    def update(self, record: ProductRecord) -> None:
        product = db.session.get(Product, record.id)
        if product is None:
            raise LookupError(f"Product {record.id} not found")
        product.apply_record(record)
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        cache_service.invalidate('brands')

    def get_or_create_category_id(self, name: str, create: bool = True) -> Optional[int]:
        return category_service.get_or_create_category_id(name, create=create)


@dataclass
class ProductFilter:
    status: str = 'all'               # all / active / archived
    category: Optional[str] = None
    brand: Optional[str] = None
    search: Optional[str] = None
    ids: List[int] = field(default_factory=list)

    @classmethod
    def from_args(cls, args) -> 'ProductFilter':
        raw_ids = args.get('ids') or ''
        if isinstance(raw_ids, str):
            raw_ids = [part for part in raw_ids.split(',') if part.strip()]
        ids = [to_int(v) for v in raw_ids if to_int(v) > 0]
        status = (args.get('status') or 'all').strip().lower()
        if status not in ('all', 'active', 'archived'):
            status = 'all'
        return cls(
            status=status,
            category=(args.get('category') or '').strip() or None,
            brand=(args.get('brand') or '').strip() or None,
            search=(args.get('search') or args.get('q') or '').strip() or None,
            ids=ids,
        )


def _search_matches(record: ProductRecord, needle: str) -> bool:
    for name in SEARCH_FIELDS:
        value = getattr(record, name)
        if value and needle in fold_turkish(value):
            return True
    return False


def filter_records(records: List[ProductRecord], flt: ProductFilter) -> List[ProductRecord]:
    """In-memory filter, Turkish-insensitive on text fields."""
    result = records
    if flt.ids:
        wanted = set(flt.ids)
        result = [r for r in result if r.id in wanted]
    if flt.status == 'active':
        result = [r for r in result if not r.is_archived]
    elif flt.status == 'archived':
        result = [r for r in result if r.is_archived]
    if flt.category:
        key = fold_turkish(flt.category.strip())
        result = [r for r in result if fold_turkish(r.category.strip()) == key]
    if flt.brand:
        key = fold_turkish(flt.brand.strip())
        result = [r for r in result if fold_turkish(r.brand.strip()) == key]
    if flt.search:
        needle = fold_turkish(flt.search.strip())
        result = [r for r in result if _search_matches(r, needle)]
    return result


def query_products(flt: ProductFilter) -> List[ProductRecord]:
    query = Product.query
    if flt.ids:
        query = query.filter(Product.id.in_(flt.ids))
    if flt.status == 'active':
        query = query.filter(Product.is_archived.is_(False))
    elif flt.status == 'archived':
        query = query.filter(Product.is_archived.is_(True))
    records = [p.to_record() for p in query.order_by(Product.id.asc()).all()]
    # Category / brand / search need Turkish folding, done in Python
    return filter_records(records, ProductFilter(category=flt.category, brand=flt.brand, search=flt.search))


def _page_limits():
    if has_app_context():
        return current_app.config.get('DEFAULT_PAGE_SIZE', 50), current_app.config.get('MAX_PAGE_SIZE', 200)
    return 50, 200


def list_products(flt: ProductFilter, page: int = 1, per_page: Optional[int] = None) -> Dict[str, Any]:
    default_size, max_size = _page_limits()
    per_page = per_page or default_size
    per_page = min(max(per_page, 1), max_size)
    page = max(page, 1)

    records = query_products(flt)
    total = len(records)
    start = (page - 1) * per_page
    items = records[start:start + per_page]
    return {
        'items': [r.to_dict() for r in items],
        'total': total,
        'page': page,
        'per_page': per_page,
        'pages': (total + per_page - 1) // per_page,
    }


def get_product(product_id: int) -> Optional[Product]:
    return db.session.get(Product, product_id)


def get_brands() -> List[str]:
    def load():
        rows = db.session.query(Product.brand).filter(Product.brand.isnot(None), Product.brand != '').distinct().all()
        return sorted({r[0].strip() for r in rows if r[0] and r[0].strip()}, key=fold_turkish)
    return cache_service.get_cached('brands', load)


# --- payload <-> record -------------------------------------------------------

def _as_list(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.splitlines() if part.strip()]
    return ['' if v is None else str(v).strip() for v in value]


def apply_payload(record: ProductRecord, data: Dict[str, Any]) -> ProductRecord:
    """Overwrite the fields present in a camelCase payload. Values are not clamped here so validation sees them."""
    for name in STRING_FIELDS:
        key = to_camel(name)
        if key in data:
            value = data[key]
            setattr(record, name, '' if value is None else str(value).strip())
    for name in FLOAT_FIELDS:
        key = to_camel(name)
        if key in data:
            setattr(record, name, to_float(data[key]))
    for name in INT_FIELDS:
        key = to_camel(name)
        if key in data:
            setattr(record, name, to_int(data[key]))
    if 'logoBarcodes' in data:
        record.logo_barcodes = decode_logo_barcodes(data['logoBarcodes'])
    if 'imageUrls' in data:
        record.image_urls = _as_list(data['imageUrls'])
    if 'marketplaceImageUrls' in data:
        record.marketplace_image_urls = _as_list(data['marketplaceImageUrls'])
    if 'videoUrls' in data:
        record.video_urls = _as_list(data['videoUrls'])
    if 'isArchived' in data:
        record.is_archived = is_truthy(data['isArchived'])
    if data.get('createdDate'):
        record.created_date = parse_datetime(data['createdDate']) or record.created_date
    return record


def _resolve_category(record: ProductRecord):
    if record.category.strip():
        record.category_id = category_service.get_or_create_category_id(record.category)
    else:
        record.category_id = None


def create_product(data: Dict[str, Any]) -> Product:
    record = apply_payload(ProductRecord(), data)
    ensure_valid(record, is_new=True)
    record.normalize()
    _resolve_category(record)
    now = datetime.now()
    record.created_date = record.created_date or now
    record.updated_date = now
    if not record.image_url:
        record.image_url = next((u for u in record.image_urls if u), '')

    product = Product()
    product.apply_record(record)
    try:
        db.session.add(product)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    cache_service.invalidate()
    logger.info(f"Product created: '{product.name}' (ID: {product.id})")
    return product


def update_product(product_id: int, data: Dict[str, Any]) -> Optional[Product]:
    product = get_product(product_id)
    if not product:
        return None
    record = apply_payload(product.to_record(), data)
    ensure_valid(record)
    record.normalize()
    if 'category' in data:
        _resolve_category(record)
    record.updated_date = datetime.now()
    if 'imageUrls' in data:
        record.image_url = next((u for u in record.image_urls if u), record.image_url)
    product.apply_record(record)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    cache_service.invalidate()
    return product


def delete_product(product_id: int) -> bool:
    product = get_product(product_id)
    if not product:
        return False
    try:
        db.session.delete(product)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    cache_service.invalidate()
    return True


def set_archived(product_id: int, archived: bool) -> Optional[Product]:
    product = get_product(product_id)
    if not product:
        return None
    product.is_archived = archived
    product.updated_date = datetime.now()
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    cache_service.invalidate()
    return product


def bulk_action(action: str, ids: List[int]) -> int:
    """archive / unarchive / delete for up to MAX_BULK_ITEMS products. Returns affected count."""
    max_items = current_app.config.get('MAX_BULK_ITEMS', 500) if has_app_context() else 500
    ids = [i for i in (to_int(v) for v in ids or []) if i > 0]
    if not ids:
        raise ValueError("İşlem için ürün seçilmedi.")
    if len(ids) > max_items:
        raise ValueError(f"Tek seferde en fazla {max_items} ürün işlenebilir.")
    if action not in ('archive', 'unarchive', 'delete'):
        raise ValueError(f"Geçersiz toplu işlem: {action}")

    query = Product.query.filter(Product.id.in_(ids))
    try:
        if action == 'delete':
            affected = query.delete(synchronize_session=False)
        else:
            affected = query.update(
                {'is_archived': action == 'archive', 'updated_date': datetime.now()},
                synchronize_session=False,
            )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    cache_service.invalidate()
    logger.info(f"Bulk {action}: {affected} products")
    return affected
