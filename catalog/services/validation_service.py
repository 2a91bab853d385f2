"""
Product validation rules used by the create/update endpoints.
Imports do not run these checks; they rely on ProductRecord.normalize().
"""
import logging
from typing import Dict, List

from catalog.models.record import ProductRecord, MAX_IMAGES, MAX_MARKETPLACE_IMAGES, MAX_VIDEOS

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 500
MAX_NAME_WORDS = 200
MAX_SKU_LENGTH = 100
MAX_BRAND_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 2000
MAX_URL_LENGTH = 1000
MAX_WEIGHT = 9999.99


class ValidationError(ValueError):
    """Raised with a field -> messages mapping when a product fails validation."""

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        messages = [m for msgs in errors.values() for m in msgs]
        super().__init__('; '.join(messages))


def _count_words(text: str) -> int:
    return len(text.split()) if text else 0


def _is_valid_url(url: str) -> bool:
    url = (url or '').strip().lower()
    return url.startswith('http://') or url.startswith('https://')


def validate_product(record: ProductRecord, is_new: bool = False) -> Dict[str, List[str]]:
    """Return field -> list of Turkish error messages. Empty dict means valid."""
    errors: Dict[str, List[str]] = {}

    def add(field_name, message):
        errors.setdefault(field_name, []).append(message)

    name = (record.name or '').strip()
    if not name:
        add('name', "Ürün adı zorunludur")
    if len(record.name or '') > MAX_NAME_LENGTH:
        add('name', f"Ürün adı en fazla {MAX_NAME_LENGTH} karakter olabilir")
    word_count = _count_words(name)
    if word_count > MAX_NAME_WORDS:
        add('name', f"Ürün adı en fazla {MAX_NAME_WORDS} kelime olabilir. Şu anda {word_count} kelime var.")

    if len(record.sku or '') > MAX_SKU_LENGTH:
        add('sku', f"SKU en fazla {MAX_SKU_LENGTH} karakter olabilir")
    if len(record.brand or '') > MAX_BRAND_LENGTH:
        add('brand', f"Marka adı en fazla {MAX_BRAND_LENGTH} karakter olabilir")
    if len(record.description or '') > MAX_DESCRIPTION_LENGTH:
        add('description', f"Açıklama en fazla {MAX_DESCRIPTION_LENGTH} karakter olabilir")

    if record.weight < 0 or record.weight > MAX_WEIGHT:
        add('weight', f"Ağırlık 0 ile {MAX_WEIGHT} kg arasında olmalıdır")
    if is_new:
        if record.desi < 0:
            add('desi', "Desi negatif olamaz")
        if record.warranty_months < 0:
            add('warrantyMonths', "Garanti süresi negatif olamaz")

    if len(record.image_urls) > MAX_IMAGES:
        add('imageUrls', f"En fazla {MAX_IMAGES} resim eklenebilir")
    if len(record.marketplace_image_urls) > MAX_MARKETPLACE_IMAGES:
        add('marketplaceImageUrls', f"En fazla {MAX_MARKETPLACE_IMAGES} pazaryeri resmi eklenebilir")
    if len(record.video_urls) > MAX_VIDEOS:
        add('videoUrls', f"En fazla {MAX_VIDEOS} video eklenebilir")

    for field_name, urls in (('imageUrls', record.image_urls),
                             ('marketplaceImageUrls', record.marketplace_image_urls),
                             ('videoUrls', record.video_urls)):
        for url in urls:
            if not url:
                continue
            if len(url) > MAX_URL_LENGTH:
                add(field_name, f"URL en fazla {MAX_URL_LENGTH} karakter olabilir")
            elif not _is_valid_url(url):
                add(field_name, f"Geçersiz URL: {url}")

    if errors:
        logger.info(f"Product validation failed for '{name or '-'}': {errors}")
    return errors


def ensure_valid(record: ProductRecord, is_new: bool = False):
    errors = validate_product(record, is_new=is_new)
    if errors:
        raise ValidationError(errors)
