import io
import logging

from flask import Blueprint, request, jsonify, send_file, current_app
from werkzeug.utils import secure_filename

from catalog.services import export_service, excel_service, product_service
from catalog.services.export_column_service import get_columns_by_category
from catalog.services.import_service import ImportService, ImportOptions, ImportFailedError, SUPPORTED_EXTENSIONS
from catalog.services.product_service import ProductFilter

logger = logging.getLogger(__name__)

import_export_bp = Blueprint('import_export', __name__)

ALLOWED_EXTENSIONS = SUPPORTED_EXTENSIONS


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def _download(content, mimetype, filename):
    data = content.encode('utf-8') if isinstance(content, str) else content
    return send_file(io.BytesIO(data), mimetype=mimetype, as_attachment=True, download_name=filename)


@import_export_bp.route('/import', methods=['POST'])
def import_products():
    """Multipart upload ('file') plus optional option flags as form fields."""
    if 'file' not in request.files:
        return jsonify({'success': False, 'message': 'Dosya seçilmedi.'}), 400
    file = request.files['file']
    if not file or file.filename == '':
        return jsonify({'success': False, 'message': 'Dosya seçilmedi.'}), 400
    filename = secure_filename(file.filename) or file.filename
    if not allowed_file(filename):
        return jsonify({'success': False, 'message': 'Desteklenmeyen dosya türü. (.csv, .xlsx, .xml, .json)'}), 400

    options = ImportOptions.from_request_args(request.form, current_app.config)
    try:
        result = ImportService().import_file(filename, io.BytesIO(file.read()), options)
    except ImportFailedError as e:
        logger.error(f"Import failed ({filename}): {e}")
        return jsonify({'success': False, 'message': str(e)}), 500

    logger.info(f"Import {filename}: {result.inserted_count} inserted, {result.updated_count} updated, "
                f"{result.error_count} errors, {result.skipped_count} skipped")
    return jsonify(result.to_dict()), (200 if result.success else 400)


@import_export_bp.route('/import/template', methods=['GET'])
def import_template():
    content = excel_service.create_import_template(export_service.import_template_columns())
    return _download(content, export_service.EXPORT_FORMATS['excel'][0], 'urun_import_sablonu.xlsx')


@import_export_bp.route('/export/columns', methods=['GET'])
def export_columns():
    grouped = get_columns_by_category()
    return jsonify({
        'categories': [
            {'name': name, 'columns': [c.to_dict() for c in columns]}
            for name, columns in grouped.items()
        ]
    })


@import_export_bp.route('/export/<fmt>', methods=['GET'])
def export_products(fmt):
    fmt = fmt.lower()
    if fmt not in export_service.EXPORT_FORMATS:
        return jsonify({'success': False, 'message': f'Desteklenmeyen format: {fmt}'}), 400
    records = product_service.query_products(ProductFilter.from_args(request.args))
    content, mimetype, filename = export_service.export_full(records, fmt)
    return _download(content, mimetype, filename)


@import_export_bp.route('/export/custom', methods=['POST'])
def export_custom():
    """Body: {"format": "csv", "columns": [...], "ids": [...], "status": ..., "search": ...}"""
    data = request.get_json(silent=True) or {}
    fmt = str(data.get('format') or 'excel').lower()
    if fmt not in export_service.EXPORT_FORMATS:
        return jsonify({'success': False, 'message': f'Desteklenmeyen format: {fmt}'}), 400
    columns = data.get('columns') or []
    if isinstance(columns, str):
        columns = [c for c in columns.split(',') if c.strip()]
    records = product_service.query_products(ProductFilter.from_args(data))
    content, mimetype, filename = export_service.export_custom(records, columns, fmt)
    return _download(content, mimetype, filename)
