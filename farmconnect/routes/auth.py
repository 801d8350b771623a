"""Authentication routes for FarmConnect."""
from flask import Blueprint, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user
from farmconnect.data_service import data_service
from farmconnect.models import SessionUser, public_user
from farmconnect.routes.helpers import json_body

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    """Log in with email and password."""
    data = json_body()
    user = data_service.authenticate(data.get('email'), data.get('password'))
    if user is None:
        return jsonify({'error': 'Invalid email or password', 'kind': 'Unauthenticated'}), 401

    login_user(SessionUser(user))
    return jsonify(public_user(user))


@auth_bp.route('/register', methods=['POST'])
def register():
    """Create an account and start a session for it."""
    data = json_body()
    password = data.pop('password', None)
    user = data_service.register(data, password)

    login_user(SessionUser(user))
    current_app.logger.info('New %s account %s', user['type'], user['id'])
    return jsonify(public_user(user)), 201


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """Logout user."""
    logout_user()
    return jsonify({'success': True})


@auth_bp.route('/me')
@login_required
def me():
    """Currently logged in user."""
    return jsonify(current_user.to_dict())
