import logging
from typing import Any, Dict, List, Sequence
from xml.parsers.expat import ExpatError

import xmltodict

from catalog.services.row_parser import FormatError, ParsedFile, parse_items

logger = logging.getLogger(__name__)


def _read_bytes(source) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, str):
        with open(source, 'rb') as f:
            return f.read()
    if hasattr(source, 'seek'):
        source.seek(0)
    data = source.read()
    return data.encode('utf-8') if isinstance(data, str) else data


def find_product_list(data):
    # 1. Direct list
    if isinstance(data, list):
        return data

    # 2. Known container keys
    candidates = ['ProductCatalog', 'productCatalog', 'Products', 'products', 'Items', 'items',
                  'Urunler', 'urunler', 'Catalog', 'catalog', 'Root', 'root']
    if isinstance(data, dict):
        for key in candidates:
            if key in data:
                val = data[key]
                # Check if this container has a sub-list (e.g. Products -> Product)
                if isinstance(val, dict):
                    for sub in ['Product', 'product', 'Item', 'item', 'Urun', 'urun']:
                        if sub in val:
                            return val[sub]  # Found the list (or single dict)
                    # Nested container (ProductCatalog -> Products -> Product)
                    nested = find_product_list(val)
                    if nested is not val:
                        return nested
                elif isinstance(val, list):
                    return val
                elif val is None:
                    return []

        # 3. Last ditch: a product-like key at this level
        for sub in ['Product', 'product', 'Item', 'item', 'Urun', 'urun']:
            if sub in data:
                return data[sub]

    return data


def read_xml_records(source) -> ParsedFile:
    """<Products>/<ProductCatalog> root with one <Product> element per record."""
    raw = _read_bytes(source)
    if not raw or not raw.strip():
        raise FormatError("XML file is empty")
    try:
        xml_obj = xmltodict.parse(raw)
    except ExpatError as e:
        raise FormatError(f"XML could not be parsed: {e}") from e

    node = find_product_list(xml_obj)
    if node is None or node is xml_obj:
        raise FormatError("No product elements found in XML")
    items = node if isinstance(node, list) else [node]
    logger.info(f"XML: processing {len(items)} items...")
    return parse_items(items)


def write_xml(items: Sequence[Dict[str, Any]], root: str = 'ProductCatalog', item_name: str = 'Product') -> str:
    """Full export: one child element per field, indented, UTF-8."""
    document = {root: {item_name: list(items)}} if items else {root: None}
    return xmltodict.unparse(document, encoding='utf-8', pretty=True, indent='  ')


def _cdata(value: Any) -> str:
    text = '' if value is None else str(value)
    # ']]>' cannot appear inside a CDATA section, split it across two sections
    return '<![CDATA[' + text.replace(']]>', ']]]]><![CDATA[>') + ']]>'


def write_custom_xml(rows: Sequence[Dict[str, Any]], columns: List[str]) -> str:
    """Custom-column export: <Products><Product><Col><![CDATA[..]]></Col>...</Product></Products>."""
    lines = ['<?xml version="1.0" encoding="utf-8"?>', '<Products>']
    for row in rows:
        lines.append('  <Product>')
        for col in columns:
            lines.append(f"    <{col}>{_cdata(row.get(col))}</{col}>")
        lines.append('  </Product>')
    lines.append('</Products>')
    return '\n'.join(lines) + '\n'
