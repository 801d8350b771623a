"""Shopping cart routes for FarmConnect."""
from flask import Blueprint, jsonify
from flask_login import login_required
from farmconnect.data_service import data_service
from farmconnect.errors import InvalidInput
from farmconnect.routes.helpers import actor, json_body, require_self

cart_bp = Blueprint('cart', __name__)


def cart_payload(items):
    return {
        'items': items,
        'total': round(sum(i['product']['price'] * i['quantity'] for i in items), 2),
        'units': sum(i['quantity'] for i in items),
    }


@cart_bp.route('/<user_id>/items')
@login_required
def get_cart(user_id):
    """View cart lines and running total."""
    require_self(user_id)
    return jsonify(cart_payload(data_service.get_cart(user_id)))


@cart_bp.route('/<user_id>/items', methods=['POST'])
@login_required
def add_item(user_id):
    """Add a product to the cart."""
    require_self(user_id)
    data = json_body()
    if not data.get('productId'):
        raise InvalidInput('productId is required')

    item = data_service.add_to_cart(actor(), data['productId'], data.get('quantity', 1))
    return jsonify(item), 201


@cart_bp.route('/<user_id>/items/<item_id>', methods=['PATCH'])
@login_required
def update_item(user_id, item_id):
    """Change a line's quantity; zero removes the line."""
    require_self(user_id)
    data = json_body()
    if 'quantity' not in data:
        raise InvalidInput('quantity is required')

    item = data_service.update_cart_item(actor(), item_id, data['quantity'])
    if item is None:
        return jsonify({'removed': True})
    return jsonify(item)


@cart_bp.route('/<user_id>/items/<item_id>', methods=['DELETE'])
@login_required
def remove_item(user_id, item_id):
    """Remove one cart line."""
    require_self(user_id)
    data_service.remove_from_cart(actor(), item_id)
    return jsonify({'removed': True})


@cart_bp.route('/<user_id>/items', methods=['DELETE'])
@login_required
def clear(user_id):
    """Empty the cart."""
    require_self(user_id)
    removed = data_service.clear_cart(actor())
    return jsonify({'removed': removed})
