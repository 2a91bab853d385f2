"""
Import Service
- ImportOptions / ImportResult
- Batch coordinator: match -> merge or insert -> persist, with per-record error accounting
- Entry points for CSV, Excel, XML and JSON payloads
"""
import json
import logging
import os
import time
from dataclasses import dataclass, field, asdict, replace
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from catalog.models.record import ProductRecord
from catalog.services import excel_service, xml_service
from catalog.services.merge_engine import merge
from catalog.services.record_matcher import build_index, match
from catalog.services.row_parser import FormatError, ParsedFile, parse_items
from catalog.utils.helpers import chunked, fold_turkish, is_truthy, to_int

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {'csv', 'xlsx', 'xml', 'json'}


class ImportFailedError(Exception):
    """Unexpected I/O failure while reading an import source."""


@dataclass
class ImportOptions:
    update_existing: bool = True
    create_categories: bool = True
    skip_errors: bool = True
    preserve_archive_status: bool = True
    batch_size: int = 100
    enable_batch_logging: bool = True
    batch_delay: float = 0.01

    @classmethod
    def from_config(cls, config) -> 'ImportOptions':
        return cls(
            batch_size=int(config.get('IMPORT_BATCH_SIZE', 100)),
            batch_delay=float(config.get('IMPORT_BATCH_DELAY', 0.01)),
            enable_batch_logging=bool(config.get('IMPORT_BATCH_LOGGING', True)),
        )

    @classmethod
    def from_request_args(cls, args, config=None) -> 'ImportOptions':
        """Build options from form/query flags, falling back to config / defaults."""
        options = cls.from_config(config) if config is not None else cls()
        for name in ('update_existing', 'create_categories', 'skip_errors',
                     'preserve_archive_status', 'enable_batch_logging'):
            if name in args and str(args.get(name)).strip() != '':
                setattr(options, name, is_truthy(args.get(name)))
        if args.get('batch_size'):
            options.batch_size = to_int(args.get('batch_size'), options.batch_size)
        if options.batch_size <= 0:
            options.batch_size = 100
        return options


@dataclass
class ImportResult:
    success: bool = False
    total_processed: int = 0
    inserted_count: int = 0
    updated_count: int = 0
    error_count: int = 0
    skipped_count: int = 0
    errors: List[str] = field(default_factory=list)
    error_message: str = ''
    processing_time: float = 0.0
    batch_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['processing_time'] = round(self.processing_time, 3)
        return data


def _record_error(record: ProductRecord, error: Any) -> str:
    message = f"Record '{record.label}': {error}"
    if record.source_row:
        message += f" (row {record.source_row})"
    return message


class ImportService:
    """
    Drives an import against a persistence service exposing
    get_all() / add(record) / update(record) / get_or_create_category_id(name, create=True).
    """

    def __init__(self, persistence=None, sleep: Callable[[float], None] = time.sleep):
        if persistence is None:
            from catalog.services.product_service import ProductPersistence
            persistence = ProductPersistence()
        self.persistence = persistence
        self._sleep = sleep

    # --- batch coordinator -----------------------------------------------------

    def process_import(self, records: List[ProductRecord], options: Optional[ImportOptions] = None) -> ImportResult:
        options = options or ImportOptions()
        started = time.time()
        result = ImportResult(total_processed=len(records))

        index = build_index(self.persistence.get_all())
        categories: Dict[str, Optional[int]] = {}

        def resolve_category(name: str) -> Optional[int]:
            key = fold_turkish(name.strip())
            if key in categories:
                return categories[key]
            try:
                category_id = self.persistence.get_or_create_category_id(name.strip(), create=options.create_categories)
            except Exception as e:
                logger.warning(f"Category could not be resolved '{name}': {e}")
                return None
            categories[key] = category_id
            return category_id

        batch_size = options.batch_size if options.batch_size > 0 else 100
        batches = list(chunked(records, batch_size))
        result.batch_count = len(batches)
        aborted = False

        for batch_no, batch in enumerate(batches, start=1):
            for record in batch:
                try:
                    self._process_record(record, index, options, resolve_category, result)
                except Exception as e:
                    message = _record_error(record, e)
                    result.error_count += 1
                    result.errors.append(message)
                    logger.warning(f"Import error: {message}")
                    if not options.skip_errors:
                        result.error_message = f"Import aborted: {message}"
                        aborted = True
                        break
            if options.enable_batch_logging:
                logger.info(f"Batch {batch_no}/{len(batches)} done: inserted={result.inserted_count}, "
                            f"updated={result.updated_count}, errors={result.error_count}")
            if aborted:
                break
            if batch_no < len(batches) and options.batch_delay > 0:
                # Let other requests reach the database between batches
                self._sleep(options.batch_delay)

        result.success = result.inserted_count > 0 or result.updated_count > 0
        result.processing_time = time.time() - started
        logger.info(f"Import finished in {result.processing_time:.2f}s: {result.inserted_count} inserted, "
                    f"{result.updated_count} updated, {result.error_count} errors")
        return result

    def _process_record(self, record: ProductRecord, index, options: ImportOptions,
                        resolve_category, result: ImportResult):
        record.normalize()
        if record.category.strip():
            record.category_id = resolve_category(record.category)

        existing = match(record, index)
        if existing is not None:
            if not options.update_existing:
                raise ValueError("already exists (updates disabled)")
            merged = merge(existing, record, options, resolve_category)
            self.persistence.update(merged)
            result.updated_count += 1
            index.replace(existing, merged)
            return

        draft = record.copy()
        draft.id = 0
        now = datetime.now()
        draft.created_date = record.created_date or now
        draft.updated_date = now
        saved = self.persistence.add(draft)
        result.inserted_count += 1
        index.add(saved if saved is not None else draft)

    # --- format entry points ----------------------------------------------------

    def _run_parsed(self, parsed: ParsedFile, options: Optional[ImportOptions], source_name: str) -> ImportResult:
        options = options or ImportOptions()
        # The file decides: an archive/active column is applied, its absence keeps stored flags
        preserve = not parsed.has_archive_column
        if options.preserve_archive_status != preserve:
            logger.info(f"{source_name}: archive/active column {'missing' if preserve else 'present'}, "
                        f"preserve_archive_status={preserve}")
            options = replace(options, preserve_archive_status=preserve)

        if not parsed.records:
            return ImportResult(
                success=False,
                skipped_count=parsed.skipped_count,
                errors=list(parsed.errors),
                error_message=f"No valid products found in {source_name} file",
            )

        result = self.process_import(parsed.records, options)
        result.skipped_count = parsed.skipped_count
        result.errors = list(parsed.errors) + result.errors
        return result

    def _guarded(self, reader, source, options, source_name: str) -> ImportResult:
        try:
            parsed = reader(source)
        except FormatError as e:
            logger.warning(f"{source_name} import rejected: {e}")
            return ImportResult(success=False, error_message=str(e))
        except OSError as e:
            logger.error(f"{source_name} source could not be read: {e}")
            raise ImportFailedError(f"{source_name} file could not be read: {e}") from e
        return self._run_parsed(parsed, options, source_name)

    def import_csv(self, source, options: Optional[ImportOptions] = None) -> ImportResult:
        return self._guarded(excel_service.read_csv_records, source, options, 'CSV')

    def import_excel(self, source, options: Optional[ImportOptions] = None) -> ImportResult:
        return self._guarded(excel_service.read_excel_records, source, options, 'Excel')

    def import_xml(self, source, options: Optional[ImportOptions] = None) -> ImportResult:
        return self._guarded(xml_service.read_xml_records, source, options, 'XML')

    def import_json(self, source, options: Optional[ImportOptions] = None) -> ImportResult:
        return self._guarded(read_json_records, source, options, 'JSON')

    def import_file(self, filename: str, source, options: Optional[ImportOptions] = None) -> ImportResult:
        ext = os.path.splitext(filename or '')[1].lower().lstrip('.')
        handlers = {
            'csv': self.import_csv,
            'xlsx': self.import_excel,
            'xml': self.import_xml,
            'json': self.import_json,
        }
        handler = handlers.get(ext)
        if handler is None:
            return ImportResult(success=False, error_message=f"Unsupported file type: .{ext or '?'}")
        return handler(source, options)


def read_json_records(source) -> ParsedFile:
    """Array of camelCase objects, or an object holding a 'products' array."""
    raw = xml_service._read_bytes(source)
    if not raw or not raw.strip():
        raise FormatError("JSON file is empty")
    try:
        data = json.loads(raw.decode('utf-8-sig') if isinstance(raw, bytes) else raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise FormatError(f"JSON could not be parsed: {e}") from e

    if isinstance(data, dict):
        for key in ('products', 'Products', 'items', 'urunler'):
            if isinstance(data.get(key), list):
                data = data[key]
                break
        else:
            data = [data]
    if not isinstance(data, list):
        raise FormatError("JSON payload must be an array of products")
    logger.info(f"JSON: processing {len(data)} items...")
    return parse_items(data)
