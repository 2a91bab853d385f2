import json
import re
from datetime import datetime
from typing import Iterable, List, Any, Optional

_TURKISH_ASCII = str.maketrans({
    'ı': 'i', 'İ': 'i', 'I': 'i',
    'ğ': 'g', 'Ğ': 'g',
    'ü': 'u', 'Ü': 'u',
    'ş': 's', 'Ş': 's',
    'ö': 'o', 'Ö': 'o',
    'ç': 'c', 'Ç': 'c',
})

TRUTHY_TOKENS = {'true', '1', 'evet', 'yes', 'aktif', 'active'}
ARCHIVED_TOKENS = {'true', '1', 'evet', 'yes', 'arsiv', 'arsivlenmis', 'arsivlendi', 'archived'}

DATETIME_FORMAT = '%Y-%m-%d %H:%M:%S'
_DATETIME_INPUT_FORMATS = (
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%dT%H:%M:%S.%f',
    '%Y-%m-%d %H:%M',
    '%Y-%m-%d',
    '%d.%m.%Y %H:%M:%S',
    '%d.%m.%Y %H:%M',
    '%d.%m.%Y',
)


def chunked(iterable: Iterable[Any], size: int) -> Iterable[List[Any]]:
    chunk: List[Any] = []
    for item in iterable:
        chunk.append(item)
        if len(chunk) >= size:
            yield chunk
            chunk = []
    if chunk:
        yield chunk


def _clean_number(value: Any) -> str:
    # Invariant culture: '.' is the decimal separator, ',' only groups thousands
    return str(value).strip().replace(' ', '').replace(',', '')


def to_int(value: Any, default: int = 0) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    try:
        return int(value)
    except Exception:
        try:
            return int(float(_clean_number(value)))
        except Exception:
            return default


def to_float(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    if isinstance(value, bool):
        return float(value)
    try:
        result = float(value)
    except Exception:
        try:
            result = float(_clean_number(value))
        except Exception:
            return default
    if result != result:  # NaN
        return default
    return result


def turkish_lower(text: str) -> str:
    """
    Convert to lowercase with Turkish character support.
    İ -> i, I -> i (not ı), so comparisons stay ASCII friendly for dotted/dotless i.
    """
    if not text:
        return ""
    result = text.replace('İ', 'i').replace('I', 'i').lower()
    result = result.replace('ı', 'i')
    return result


def fold_turkish(text: str) -> str:
    """Lowercase and replace Turkish letters with their ASCII equivalents."""
    if not text:
        return ""
    return str(text).translate(_TURKISH_ASCII).lower()


def is_truthy(value: Any, tokens=TRUTHY_TOKENS) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return fold_turkish(str(value).strip()) in tokens


def parse_datetime(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if not text:
        return None
    for fmt in _DATETIME_INPUT_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_datetime(value: Optional[datetime]) -> str:
    if not value:
        return ''
    return value.strftime(DATETIME_FORMAT)


def format_decimal(value: Any) -> str:
    """Invariant decimal text: no grouping, '.' separator, no trailing zeros."""
    if value is None:
        return '0'
    if isinstance(value, int):
        return str(value)
    text = f"{float(value):.6f}".rstrip('0').rstrip('.')
    return text or '0'


def to_camel(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part[:1].upper() + part[1:] for part in rest)


def to_pascal(name: str) -> str:
    return ''.join(part[:1].upper() + part[1:] for part in name.split('_'))


# --- Logo barcode slots -------------------------------------------------------
# Stored as one comma-joined string. Slot i+1 lives at index i, interior blanks
# are kept so positions survive, trailing blanks are trimmed.

def encode_logo_barcodes(values: Iterable[Any]) -> str:
    items = ['' if v is None else str(v).strip().replace(',', '') for v in values]
    while items and not items[-1]:
        items.pop()
    return ','.join(items)


def decode_logo_barcodes(text: Any) -> List[str]:
    if text is None:
        return []
    if isinstance(text, (list, tuple)):
        return ['' if v is None else str(v).strip() for v in text]
    raw = str(text).strip()
    if not raw:
        return []
    if raw.startswith('['):
        try:
            data = json.loads(raw)
            if isinstance(data, list):
                return ['' if v is None else str(v).strip() for v in data]
        except ValueError:
            pass
    if ',' in raw:
        return [part.strip() for part in raw.split(',')]
    return [part.strip() for part in re.split(r'\r?\n', raw)]


def get_logo_barcode(text: Any, index: int) -> str:
    values = decode_logo_barcodes(text)
    if 0 <= index < len(values):
        return values[index]
    return ''


def set_logo_barcode(text: Any, index: int, value: Any) -> str:
    values = decode_logo_barcodes(text)
    set_indexed(values, index, value)
    return encode_logo_barcodes(values)


def set_indexed(values: List[str], index: int, value: Any) -> None:
    """Write value at position index, padding the list with empty strings."""
    if index < 0:
        return
    while len(values) <= index:
        values.append('')
    values[index] = '' if value is None else str(value).strip()


def first_non_empty(values: Iterable[Any]) -> str:
    for v in values or []:
        if v and str(v).strip():
            return str(v).strip()
    return ''
