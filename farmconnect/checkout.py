"""Cart-to-order workflow.

A consumer's cart may hold products from several farmers. Checkout splits it
into one order per farmer, reserves stock, clears the consumed cart lines and
notifies every farmer, all inside the caller's store transaction.
"""
import logging
from farmconnect.errors import InvalidInput, Unauthorized

logger = logging.getLogger(__name__)


def group_by_farmer(lines):
    """Partition cart lines by farmer, keeping first-appearance order."""
    groups = {}
    for line in lines:
        groups.setdefault(line['product']['farmerId'], []).append(line)
    return groups


def lines_total(lines):
    return round(sum(line['product']['price'] * line['quantity'] for line in lines), 2)


def place_order(users, products, cart, orders, notifications, customer_id,
                payment_method, delivery_address, notes=None, payment_methods=None):
    """Turn the customer's whole cart into per-farmer pending orders."""
    customer = users.get(customer_id)
    if customer is None or customer.get('type') != 'consumer':
        raise Unauthorized('Only consumers can place orders')

    delivery_address = (delivery_address or '').strip()
    if not delivery_address:
        raise InvalidInput('Please enter delivery address')
    if payment_methods is not None and payment_method not in payment_methods:
        raise InvalidInput(f'Unsupported payment method: {payment_method}')

    lines = cart.for_customer(customer_id)
    if not lines:
        raise InvalidInput('Your cart is empty')

    for line in lines:
        product = products.get(line['productId'])
        # lines whose product was deleted are sold from their snapshot
        if product is not None:
            products.adjust_inventory(product, -line['quantity'])

    placed = []
    for farmer_id, farmer_lines in group_by_farmer(lines).items():
        order = orders.create(
            customer_id,
            farmer_id,
            [dict(line) for line in farmer_lines],
            lines_total(farmer_lines),
            payment_method,
            delivery_address,
            notes=notes or None
        )
        placed.append(order)

    cart.clear(customer_id, item_ids={line['id'] for line in lines})

    for order in placed:
        notifications.create(
            order['farmerId'],
            'order',
            'New Order Received',
            f"You have received a new order worth ₹{order['total']:.2f}",
            action_url='/farmer-dashboard'
        )

    logger.info('Customer %s placed %d order(s)', customer_id, len(placed))
    return placed
