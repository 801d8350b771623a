"""Order routes for FarmConnect - Checkout and order tracking."""
from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from farmconnect.data_service import data_service
from farmconnect.errors import InvalidInput, NotFound
from farmconnect.models import USER_TYPES
from farmconnect.order_status import allowed_transitions
from farmconnect.routes.helpers import actor, json_body, require_self

orders_bp = Blueprint('orders', __name__)


@orders_bp.route('/', methods=['POST'], strict_slashes=False)
@login_required
def checkout():
    """Place orders for everything in the cart, one per farmer."""
    data = json_body()
    orders = data_service.place_order(
        actor(),
        data.get('paymentMethod', 'cod'),
        data.get('deliveryAddress'),
        data.get('notes')
    )
    current_app.logger.info('Checkout by %s created %d order(s)', current_user.id, len(orders))
    return jsonify({
        'orders': orders,
        'total': round(sum(o['total'] for o in orders), 2),
    }), 201


@orders_bp.route('/', strict_slashes=False)
@login_required
def list_orders():
    """Orders received (farmer) or placed (consumer), newest first."""
    user_id = request.args.get('userId', current_user.id)
    role = request.args.get('role', current_user.type)
    require_self(user_id)
    if role not in USER_TYPES:
        raise InvalidInput(f'Unknown role: {role}')

    status = request.args.get('status')
    orders = data_service.get_orders(user_id, role)
    if status:
        orders = [o for o in orders if o['status'] == status]
    return jsonify(orders)


@orders_bp.route('/<order_id>')
@login_required
def order_detail(order_id):
    """View one order the user is a party to."""
    order = data_service.get_order(order_id)
    if order is None or current_user.id not in (order['customerId'], order['farmerId']):
        raise NotFound('Order not found')
    return jsonify(dict(order, nextStatuses=list(allowed_transitions(order['status']))))


@orders_bp.route('/<order_id>/status', methods=['PATCH'])
@login_required
def update_status(order_id):
    """Move an order to its next status."""
    data = json_body()
    if not data.get('status'):
        raise InvalidInput('status is required')

    order = data_service.update_order_status(actor(), order_id, data['status'])
    return jsonify(order)
