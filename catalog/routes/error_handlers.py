import logging

from flask import Blueprint, jsonify

logger = logging.getLogger(__name__)

errors_bp = Blueprint('errors', __name__)


@errors_bp.app_errorhandler(400)
def bad_request(error):
    return jsonify({'success': False, 'message': 'Geçersiz istek.'}), 400


@errors_bp.app_errorhandler(404)
def not_found(error):
    return jsonify({'success': False, 'message': 'Kayıt bulunamadı.'}), 404


@errors_bp.app_errorhandler(413)
def too_large(error):
    return jsonify({'success': False, 'message': 'Dosya boyutu çok büyük (en fazla 50 MB).'}), 413


@errors_bp.app_errorhandler(500)
def internal_error(error):
    logger.error(f"Unhandled server error: {error}")
    from catalog import db
    db.session.rollback()
    return jsonify({'success': False, 'message': 'Sunucu hatası oluştu.'}), 500
