"""
Header Normalizer
- Folds a raw spreadsheet/CSV/XML/JSON column header (Turkish or English)
- Maps it onto one canonical field id used by the row parser

The alias table is built once at import time and exposed read-only.
"""
import logging
import re
from types import MappingProxyType
from typing import Dict, Iterable, List

from catalog.utils.helpers import fold_turkish

logger = logging.getLogger(__name__)

# Numbered field families: canonical prefix -> (max index, accepted prefixes)
NUMBERED_FAMILIES = {
    'logobarcode': (10, ['logobarkodu', 'logobarkod', 'logobarcode']),
    'productimage': (10, ['urungorseli', 'urungovseli', 'urungorsel', 'productimage',
                          'gorsel', 'image', 'imageurl', 'resim']),
    'marketplaceimage': (10, ['pazaryerigorseli', 'pazaryerigovseli', 'pazaryerigorsel',
                              'marketplaceimage', 'marketplaceimageurl', 'marketgorsel']),
    'video': (5, ['video', 'videourl']),
}

# canonical field id -> accepted (already folded) spellings
_ALIASES = {
    # Basic fields
    'id': ['id', 'urunid', 'productid'],
    'name': ['name', 'urunadi', 'urunismi', 'productname', 'ad', 'baslik', 'title'],
    'sku': ['sku', 'stokkodu', 'stockcode'],
    'brand': ['brand', 'marka'],
    'category': ['category', 'kategori', 'kategoriadi', 'categoryname'],
    'description': ['description', 'aciklama', 'urunaciklamasi'],
    'descriptionhtml': ['descriptionhtml', 'aciklamahtml'],
    'descriptionplain': ['descriptionplain', 'descriptionplaintext', 'aciklamaduzmetin'],
    'features': ['features', 'ozellikler'],
    'notes': ['notes', 'notlar'],
    'imageurl': ['imageurl', 'anagorsel', 'mainimage'],

    # Physical attributes
    'weight': ['weight', 'agirlik', 'agirlikkg'],
    'desi': ['desi'],
    'width': ['width', 'genislik', 'genislikcm'],
    'height': ['height', 'yukseklik', 'yukseklikcm'],
    'depth': ['depth', 'en', 'encm'],
    'length': ['length', 'uzunluk', 'uzunlukcm'],
    'material': ['material', 'malzeme'],
    'color': ['color', 'renk'],
    'warrantymonths': ['warrantymonths', 'warranty', 'garanti', 'garantiay'],
    'eancode': ['eancode', 'eankodu', 'ean'],

    # Status and dates
    'archived': ['archived', 'isarchived', 'arsivlenmis', 'arsiv', 'arsivde'],
    'active': ['active', 'isactive', 'aktif', 'durum', 'status'],
    'createddate': ['createddate', 'createdat', 'olusturmatarihi'],
    'updateddate': ['updateddate', 'updatedat', 'guncellemetarihi', 'guncellenmetarihi'],

    # Marketplace barcodes
    'trendyolbarcode': ['trendyolbarcode', 'trendyolbarkod'],
    'hepsiburadabarcode': ['hepsiburadabarcode', 'hepsiburadabarkod'],
    'hepsiburadasellerstockcode': ['hepsiburadasellerstockcode', 'hepsiburadasaticistokkodu',
                                   'hepsiburadasaticisokkodu', 'hepsiburadaticikstokkodu',
                                   'hepsiburadasekkerstockcode', 'hepsiburadasekkersockcode'],
    'koctasbarcode': ['koctasbarcode', 'koctasbarkod'],
    'koctasistanbulbarcode': ['koctasistanbulbarcode', 'koctasistanbulbarkod'],
    'koctaseanbarcode': ['koctaseanbarcode', 'koctaseanbarkod'],
    'koctaseanistanbulbarcode': ['koctaseanistanbulbarcode', 'koctaseanistanbulbarkod'],
    'hepsiburadatedarikbarcode': ['hepsiburadatedarikbarcode', 'hepsiburadatedarikbarkod'],
    'pttavmbarcode': ['pttavmbarcode', 'pttavmbarkod'],
    'ptturunstokkodu': ['ptturunstokkodu', 'ptturunstokodu', 'ptturunid', 'pttproductcode'],
    'pazaramabarcode': ['pazaramabarcode', 'pazaramabarkod'],
    'haceyapibarcode': ['haceyapibarcode', 'haceyapibarkod'],
    'amazonbarcode': ['amazonbarcode', 'amazonbarkod'],
    'n11catalogid': ['n11catalogid', 'n11katalogid'],
    'n11productcode': ['n11productcode', 'n11urunkodu'],

    # External integration
    'entegraurunid': ['entegraurunid', 'entegraproductid'],
    'entegraurunkodu': ['entegraurunkodu', 'entegraproductcode'],
    'entegrabarkod': ['entegrabarkod', 'entegrabarcode'],

    # Spare barcodes
    'sparebarcode1': ['sparebarcode1', 'yedekbarkod1'],
    'sparebarcode2': ['sparebarcode2', 'yedekbarkod2'],
    'sparebarcode3': ['sparebarcode3', 'yedekbarkod3'],
    'sparebarcode4': ['sparebarcode4', 'yedekbarkod4'],

    # Sanitary-ware attributes
    'klozetkanalyapisi': ['klozetkanalyapisi', 'klozetkanlyapisi'],
    'klozettipi': ['klozettipi'],
    'klozetkapakcinsi': ['klozetkapakcinsi'],
    'klozetmontajtipi': ['klozetmontajtipi'],
    'lavabosutasmadeligi': ['lavabosutasmadeligi', 'lawabosutasmadeligi',
                            'lawabosumasadeligi', 'lawabosuasmaseligu'],
    'lavaboarmaturdeligi': ['lavaboarmaturdeligi', 'lawaboarmaturdeligi'],
    'lavabotipi': ['lavabotipi', 'lawabotipi'],
    'lavaboozelligi': ['lavaboozelligi', 'lawaboozelligi', 'lawaboozeligi', 'lawaboozellix'],
    'bataryacikisucuuzunlugu': ['bataryacikisucuuzunlugu'],
    'bataryayuksekligi': ['bataryayuksekligi'],
}

_STRIP_RE = re.compile(r'[^a-z0-9]')


def fold_header(raw_header) -> str:
    """Lowercase, drop Turkish diacritics and remove every non alphanumeric char."""
    if raw_header is None:
        return ''
    return _STRIP_RE.sub('', fold_turkish(str(raw_header).strip()))


def _build_mapping() -> Dict[str, str]:
    mapping: Dict[str, str] = {}

    def safe_add(key, value):
        if key in mapping and mapping[key] != value:
            logger.warning(f"Duplicate header alias ignored: '{key}' -> '{value}'")
            return
        mapping[key] = value

    for canonical, aliases in _ALIASES.items():
        safe_add(canonical, canonical)
        for alias in aliases:
            safe_add(alias, canonical)

    for canonical_prefix, (count, prefixes) in NUMBERED_FAMILIES.items():
        for i in range(1, count + 1):
            safe_add(f"{canonical_prefix}{i}", f"{canonical_prefix}{i}")
            for prefix in prefixes:
                safe_add(f"{prefix}{i}", f"{canonical_prefix}{i}")
    return mapping


HEADER_MAPPINGS = MappingProxyType(_build_mapping())
CANONICAL_FIELDS = frozenset(HEADER_MAPPINGS.values())


def normalize(raw_header) -> str:
    """
    Map a raw header onto its canonical field id.
    Unknown headers come back as their folded form; never raises.
    """
    try:
        folded = fold_header(raw_header)
    except Exception as e:
        logger.debug(f"Header could not be folded '{raw_header}': {e}")
        return ''
    mapped = HEADER_MAPPINGS.get(folded)
    if mapped is None:
        logger.debug(f"Unmapped header: '{raw_header}' -> '{folded}'")
        return folded
    return mapped


def is_known(canonical: str) -> bool:
    return canonical in CANONICAL_FIELDS


def normalize_headers(raw_headers: Iterable) -> List[str]:
    return [normalize(h) for h in raw_headers]


def unmapped_headers(raw_headers: Iterable) -> List[str]:
    """Raw headers (non-empty) that do not resolve to a canonical field."""
    result = []
    for h in raw_headers:
        if h is None or not str(h).strip():
            continue
        if not is_known(normalize(h)):
            result.append(str(h))
    return result


# Folded names of list-valued JSON/XML fields -> numbered family prefix
LIST_HEADER_PREFIXES = MappingProxyType({
    'imageurls': 'productimage',
    'images': 'productimage',
    'productimages': 'productimage',
    'gorseller': 'productimage',
    'marketplaceimageurls': 'marketplaceimage',
    'marketplaceimages': 'marketplaceimage',
    'pazaryerigorselleri': 'marketplaceimage',
    'videourls': 'video',
    'videos': 'video',
    'videolar': 'video',
    'logobarcodes': 'logobarcode',
    'logobarkodlari': 'logobarcode',
    # repeated XML elements arrive as lists under the singular name
    'imageurl': 'productimage',
    'marketplaceimageurl': 'marketplaceimage',
    'videourl': 'video',
    'logobarcode': 'logobarcode',
})
