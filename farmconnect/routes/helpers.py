"""Request helpers shared by the FarmConnect blueprints."""
from flask_login import current_user
from flask import request
from farmconnect.errors import InvalidInput, Unauthorized


def actor():
    """Stored record of the logged-in user."""
    return current_user.record


def json_body():
    """Request JSON object, or an empty dict when no body was sent."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInput('Request body must be a JSON object')
    return data


def require_self(user_id):
    """Users may only act on their own cart, orders and notifications."""
    if user_id != current_user.id:
        raise Unauthorized('You can only access your own data')


def arg_float(name):
    value = request.args.get(name)
    if value in (None, ''):
        return None
    try:
        return float(value)
    except ValueError:
        raise InvalidInput(f'{name} must be a number') from None


def arg_bool(name):
    value = request.args.get(name)
    if value in (None, ''):
        return None
    lowered = value.lower()
    if lowered in ('true', '1', 'yes'):
        return True
    if lowered in ('false', '0', 'no'):
        return False
    raise InvalidInput(f'{name} must be true or false')
