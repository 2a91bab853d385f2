import logging

from flask import Blueprint, request, jsonify

from catalog.services import product_service
from catalog.services.product_service import ProductFilter
from catalog.services.validation_service import ValidationError
from catalog.utils.helpers import to_int

logger = logging.getLogger(__name__)

products_bp = Blueprint('products', __name__, url_prefix='/products')


@products_bp.route('', methods=['GET'])
def list_products():
    """Paginated product list. Filters: status, category, brand, search, ids."""
    flt = ProductFilter.from_args(request.args)
    page = to_int(request.args.get('page'), 1)
    per_page = to_int(request.args.get('per_page'), 0) or None
    return jsonify(product_service.list_products(flt, page=page, per_page=per_page))


@products_bp.route('/brands', methods=['GET'])
def list_brands():
    return jsonify({'items': product_service.get_brands()})


@products_bp.route('/<int:product_id>', methods=['GET'])
def get_product(product_id):
    product = product_service.get_product(product_id)
    if not product:
        return jsonify({'success': False, 'message': 'Ürün bulunamadı.'}), 404
    return jsonify(product.to_dict())


@products_bp.route('', methods=['POST'])
def create_product():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'success': False, 'message': 'Geçersiz istek gövdesi.'}), 400
    try:
        product = product_service.create_product(data)
        return jsonify({'success': True, 'id': product.id, 'product': product.to_dict()}), 201
    except ValidationError as e:
        return jsonify({'success': False, 'message': str(e), 'errors': e.errors}), 400
    except Exception as e:
        logger.error(f"Product create failed: {e}")
        return jsonify({'success': False, 'message': str(e)}), 500


@products_bp.route('/<int:product_id>', methods=['PUT'])
def update_product(product_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'success': False, 'message': 'Geçersiz istek gövdesi.'}), 400
    try:
        product = product_service.update_product(product_id, data)
        if not product:
            return jsonify({'success': False, 'message': 'Ürün bulunamadı.'}), 404
        return jsonify({'success': True, 'product': product.to_dict()})
    except ValidationError as e:
        return jsonify({'success': False, 'message': str(e), 'errors': e.errors}), 400
    except Exception as e:
        logger.error(f"Product update failed ({product_id}): {e}")
        return jsonify({'success': False, 'message': str(e)}), 500


@products_bp.route('/<int:product_id>', methods=['DELETE'])
def delete_product(product_id):
    try:
        if not product_service.delete_product(product_id):
            return jsonify({'success': False, 'message': 'Ürün bulunamadı.'}), 404
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Product delete failed ({product_id}): {e}")
        return jsonify({'success': False, 'message': str(e)}), 500


@products_bp.route('/<int:product_id>/archive', methods=['POST'])
def archive_product(product_id):
    """Body {"archived": true|false}; archives when omitted."""
    data = request.get_json(silent=True) or {}
    archived = bool(data.get('archived', True))
    product = product_service.set_archived(product_id, archived)
    if not product:
        return jsonify({'success': False, 'message': 'Ürün bulunamadı.'}), 404
    return jsonify({'success': True, 'isArchived': product.is_archived})


@products_bp.route('/bulk', methods=['POST'])
def bulk_action():
    data = request.get_json(silent=True) or {}
    try:
        affected = product_service.bulk_action(data.get('action', ''), data.get('ids') or [])
        return jsonify({'success': True, 'affected': affected})
    except ValueError as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except Exception as e:
        logger.error(f"Bulk action failed: {e}")
        return jsonify({'success': False, 'message': str(e)}), 500
