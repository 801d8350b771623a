"""Main routes for FarmConnect - Service info."""
from flask import Blueprint, jsonify, current_app

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    """Service name, status and supported languages."""
    return jsonify({
        'name': 'FarmConnect',
        'status': 'ok',
        'defaultLanguage': current_app.config['DEFAULT_LANGUAGE'],
        'languages': current_app.config['SUPPORTED_LANGUAGES'],
    })
