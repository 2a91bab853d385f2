"""
CSV / Excel adapters
- Read CSV and .xlsx files into draft records (pandas)
- Write tabular exports and the import template
"""
import io
import logging
from typing import Any, Dict, List, Sequence

import pandas as pd

from catalog.services.row_parser import FormatError, ParsedFile, parse_table

logger = logging.getLogger(__name__)


def _read_source(source):
    """Rewind file-like sources so the same upload can be read again."""
    if hasattr(source, 'seek'):
        try:
            source.seek(0)
        except (OSError, ValueError):
            pass
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(source)
    return source


def read_csv_records(source) -> ParsedFile:
    """
    Parse a comma-delimited UTF-8 CSV (header row required).
    Lines with more fields than the header are dropped and reported.
    Blank lines are kept so data rows carry their file line numbers; a quoted
    field spanning several lines, or a dropped over-long line, shifts the rows after it.
    """
    bad_lines: List[List[str]] = []

    def on_bad_line(line: List[str]):
        bad_lines.append(line)
        return None

    try:
        df = pd.read_csv(
            _read_source(source),
            sep=',',
            quotechar='"',
            dtype=str,
            keep_default_na=False,
            encoding='utf-8-sig',
            engine='python',
            on_bad_lines=on_bad_line,
            skip_blank_lines=False,
        )
    except pd.errors.EmptyDataError as e:
        raise FormatError("CSV file does not contain enough data (header and at least one row required)") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise FormatError(f"CSV file could not be parsed: {e}") from e

    if df.empty and not bad_lines:
        raise FormatError("CSV file does not contain enough data (header and at least one row required)")

    df = df.fillna('')
    parsed = parse_table(list(df.columns), df.values.tolist(), first_row_number=2)
    for line in bad_lines:
        label = line[0] if line else ''
        parsed.errors.append(
            f"Column count mismatch: {len(line)} values, header has {len(df.columns)} (row starting '{label}')"
        )
        parsed.skipped_count += 1
    logger.info(f"CSV parsed: {len(parsed.records)} records, {parsed.skipped_count} skipped")
    return parsed


def read_excel_records(source) -> ParsedFile:
    """First worksheet only, header in row 1, data from row 2."""
    try:
        df = pd.read_excel(_read_source(source), sheet_name=0, dtype=str, engine='openpyxl')
    except OSError:
        raise
    except Exception as e:
        raise FormatError(f"Excel file could not be read: {e}") from e

    if df.empty:
        raise FormatError("Excel file does not contain any data rows")

    df = df.fillna('')
    headers = [('' if str(c).startswith('Unnamed:') else str(c)) for c in df.columns]
    parsed = parse_table(headers, df.values.tolist(), first_row_number=2)
    logger.info(f"Excel parsed: {len(parsed.records)} records, {parsed.skipped_count} skipped")
    return parsed


def rows_to_dataframe(rows: Sequence[Dict[str, Any]], columns: Sequence[str]) -> pd.DataFrame:
    return pd.DataFrame(list(rows), columns=list(columns))


def write_csv(rows: Sequence[Dict[str, Any]], columns: Sequence[str]) -> str:
    """RFC4180 style: fields holding a comma, quote or newline are quoted, quotes doubled."""
    df = rows_to_dataframe(rows, columns)
    return df.to_csv(index=False, lineterminator='\n')


def write_excel(rows: Sequence[Dict[str, Any]], columns: Sequence[str], sheet_name: str = 'Ürünler') -> bytes:
    df = rows_to_dataframe(rows, columns)
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
    return output.getvalue()


def create_import_template(columns: Sequence[str]) -> bytes:
    """Empty workbook holding only the header row."""
    return write_excel([], columns, sheet_name='Şablon')
