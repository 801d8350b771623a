"""Settings routes for FarmConnect."""
from flask import Blueprint, jsonify, current_app
from flask_login import login_required, current_user
from farmconnect.data_service import data_service
from farmconnect.errors import InvalidInput
from farmconnect.models import public_user
from farmconnect.routes.helpers import json_body

settings_bp = Blueprint('settings', __name__)


@settings_bp.route('/languages')
def languages():
    """Supported language codes."""
    return jsonify({
        'default': current_app.config['DEFAULT_LANGUAGE'],
        'supported': current_app.config['SUPPORTED_LANGUAGES'],
    })


@settings_bp.route('/profile', methods=['PATCH'])
@login_required
def update_profile():
    """Update user profile and language preference."""
    user = data_service.update_profile(current_user.id, json_body())
    return jsonify(public_user(user))


@settings_bp.route('/subscription', methods=['POST'])
@login_required
def update_subscription():
    """Activate or change the farmer subscription (payment is simulated)."""
    data = json_body()
    if not data.get('status'):
        raise InvalidInput('status is required')

    user = data_service.update_subscription(current_user.id, data['status'], data.get('endDate'))
    current_app.logger.info('Subscription of %s is now %s', user['id'], user['subscriptionStatus'])
    return jsonify(public_user(user))
