import logging
from typing import Optional

from catalog import db
from catalog.models import Category, Product
from catalog.services import cache_service

logger = logging.getLogger(__name__)

MAX_CATEGORY_NAME_LENGTH = 100


def get_categories(active_only: bool = False):
    """Category list as dicts (cached)."""
    return cache_service.get_cached(
        f"categories:{int(active_only)}",
        lambda: [c.to_dict() for c in Category.get_all(active_only=active_only)],
    )


def get_category(category_id: int) -> Optional[Category]:
    return db.session.get(Category, category_id)


def get_or_create_category_id(name: str, create: bool = True) -> Optional[int]:
    """Existing category id for name; creates the category when allowed and missing."""
    name = (name or '').strip()
    if not name:
        return None
    existing = Category.get_by_name(name)
    if existing:
        return existing.id
    if not create:
        return None
    try:
        category = Category(name=name[:MAX_CATEGORY_NAME_LENGTH], is_active=True)
        db.session.add(category)
        db.session.commit()
        cache_service.invalidate('categories')
        logger.info(f"Category created: '{category.name}' (ID: {category.id})")
        return category.id
    except Exception:
        db.session.rollback()
        raise


def _validate_name(name: str, exclude_id: Optional[int] = None) -> str:
    name = (name or '').strip()
    if not name:
        raise ValueError("Kategori adı zorunludur.")
    if len(name) > MAX_CATEGORY_NAME_LENGTH:
        raise ValueError(f"Kategori adı en fazla {MAX_CATEGORY_NAME_LENGTH} karakter olabilir.")
    existing = Category.get_by_name(name)
    if existing and existing.id != exclude_id:
        raise ValueError(f"'{name}' adında bir kategori zaten mevcut.")
    return name


def create_category(name: str, description: Optional[str] = None, is_active: bool = True) -> Category:
    category = Category(
        name=_validate_name(name),
        description=(description or '').strip() or None,
        is_active=is_active,
    )
    try:
        db.session.add(category)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    cache_service.invalidate('categories')
    return category


def update_category(category_id: int, name: Optional[str] = None, description: Optional[str] = None,
                    is_active: Optional[bool] = None) -> Optional[Category]:
    category = get_category(category_id)
    if not category:
        return None
    old_name = category.name
    if name is not None:
        category.name = _validate_name(name, exclude_id=category.id)
    if description is not None:
        category.description = description.strip() or None
    if is_active is not None:
        category.is_active = bool(is_active)
    try:
        if category.name != old_name:
            # Keep the denormalized name on products in sync
            Product.query.filter_by(category_id=category.id).update({'category': category.name})
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    cache_service.invalidate()
    return category


def delete_category(category_id: int) -> bool:
    """Delete a category. Raises ValueError while products still reference it."""
    category = get_category(category_id)
    if not category:
        return False
    usage = Product.query.filter_by(category_id=category.id).count()
    if usage > 0:
        raise ValueError(f"Bu kategori {usage} ürün tarafından kullanılmaktadır. Önce ürünlerin kategorisini değiştirin.")
    try:
        db.session.delete(category)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    cache_service.invalidate('categories')
    return True
