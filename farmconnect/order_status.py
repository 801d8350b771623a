"""Order status state machine.

Orders move ``pending -> confirmed -> shipped -> delivered``; a pending order
may instead be ``cancelled``. Delivered and cancelled orders are final.
"""
import logging
from farmconnect.errors import InvalidInput, InvalidTransition, Unauthorized
from farmconnect.models import ORDER_STATUSES

logger = logging.getLogger(__name__)

TRANSITIONS = {
    'pending': ('confirmed', 'cancelled'),
    'confirmed': ('shipped',),
    'shipped': ('delivered',),
    'delivered': (),
    'cancelled': (),
}


def allowed_transitions(status):
    return TRANSITIONS.get(status, ())


def check_transition(current, requested):
    if requested not in ORDER_STATUSES:
        raise InvalidInput(f'Unknown order status: {requested}')
    if requested not in allowed_transitions(current):
        raise InvalidTransition(current, requested)


def check_actor(order, actor, requested):
    """The selling farmer drives the order; the buyer may only cancel it."""
    if actor.get('type') == 'farmer' and actor['id'] == order['farmerId']:
        return
    if requested == 'cancelled' and actor['id'] == order['customerId']:
        return
    raise Unauthorized('You cannot change the status of this order')


def apply_transition(orders, products, notifications, order, requested, actor):
    """Validate and apply a status change, then tell the consumer about it."""
    # outsiders learn nothing about the order's current status
    check_actor(order, actor, requested)
    check_transition(order['status'], requested)

    previous = order['status']
    orders.set_status(order, requested)

    if requested == 'cancelled':
        # release stock reserved at checkout
        for item in order['items']:
            product = products.get(item['productId'])
            if product is not None:
                products.adjust_inventory(product, item['quantity'])

    notifications.create(
        order['customerId'],
        'order',
        'Order Status Updated',
        f"Your order #{order['id']} is now {requested}",
        action_url='/orders'
    )
    logger.info('Order %s moved from %s to %s', order['id'], previous, requested)
    return order
