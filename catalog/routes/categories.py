import logging

from flask import Blueprint, request, jsonify

from catalog.services import category_service
from catalog.utils.helpers import is_truthy

logger = logging.getLogger(__name__)

categories_bp = Blueprint('categories', __name__, url_prefix='/categories')


@categories_bp.route('', methods=['GET'])
def list_categories():
    active_only = is_truthy(request.args.get('active_only', ''))
    return jsonify({'items': category_service.get_categories(active_only=active_only)})


@categories_bp.route('/<int:category_id>', methods=['GET'])
def get_category(category_id):
    category = category_service.get_category(category_id)
    if not category:
        return jsonify({'success': False, 'message': 'Kategori bulunamadı.'}), 404
    return jsonify(category.to_dict())


@categories_bp.route('', methods=['POST'])
def create_category():
    data = request.get_json(silent=True) or {}
    try:
        category = category_service.create_category(
            data.get('name', ''),
            description=data.get('description'),
            is_active=is_truthy(data.get('isActive', True)),
        )
        return jsonify({'success': True, 'id': category.id, 'category': category.to_dict()}), 201
    except ValueError as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except Exception as e:
        logger.error(f"Category create failed: {e}")
        return jsonify({'success': False, 'message': str(e)}), 500


@categories_bp.route('/<int:category_id>', methods=['PUT'])
def update_category(category_id):
    data = request.get_json(silent=True) or {}
    try:
        category = category_service.update_category(
            category_id,
            name=data.get('name'),
            description=data.get('description'),
            is_active=is_truthy(data['isActive']) if 'isActive' in data else None,
        )
        if not category:
            return jsonify({'success': False, 'message': 'Kategori bulunamadı.'}), 404
        return jsonify({'success': True, 'category': category.to_dict()})
    except ValueError as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except Exception as e:
        logger.error(f"Category update failed ({category_id}): {e}")
        return jsonify({'success': False, 'message': str(e)}), 500


@categories_bp.route('/<int:category_id>', methods=['DELETE'])
def delete_category(category_id):
    try:
        if not category_service.delete_category(category_id):
            return jsonify({'success': False, 'message': 'Kategori bulunamadı.'}), 404
        return jsonify({'success': True})
    except ValueError as e:
        return jsonify({'success': False, 'message': str(e)}), 409
    except Exception as e:
        logger.error(f"Category delete failed ({category_id}): {e}")
        return jsonify({'success': False, 'message': str(e)}), 500
