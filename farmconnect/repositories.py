"""Entity repositories for FarmConnect.

Each repository wraps one array of an open snapshot and mutates it in place;
saving is left to the caller's store transaction. Lookups of absent ids
return ``None`` (or ``False`` for deletes) and the caller decides whether
that is an error.
"""
from datetime import datetime, timezone
from farmconnect.errors import InvalidInput
from farmconnect.models import (USER_TYPES, SUBSCRIPTION_STATUSES, NOTIFICATION_TYPES,
                                new_id, timestamp, parse_timestamp)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def newest_first(records, field):
    return sorted(records, key=lambda r: parse_timestamp(r.get(field)) or _EPOCH, reverse=True)


def whole_number(value, field):
    """Coerce an integer-valued field, rejecting fractions and non-numbers."""
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise InvalidInput(f'{field} must be a whole number')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidInput(f'{field} must be a whole number') from None


def price_value(value):
    try:
        price = round(float(value), 2)
    except (TypeError, ValueError):
        raise InvalidInput('Price must be a number') from None
    if price < 0:
        raise InvalidInput('Price cannot be negative')
    return price


def inventory_value(value):
    inventory = whole_number(value, 'Inventory')
    if inventory < 0:
        raise InvalidInput('Inventory cannot be negative')
    return inventory


def product_predicate(category=None, location=None, min_price=None, max_price=None,
                      organic=None, available=None, farmer_id=None, search=None):
    """Build one predicate ANDing every filter that was given."""
    checks = []
    if category and category != 'all':
        checks.append(lambda p: p.get('category') == category)
    if location:
        needle = location.lower()
        checks.append(lambda p: needle in (p.get('location') or '').lower())
    if min_price is not None:
        checks.append(lambda p: p.get('price', 0) >= min_price)
    if max_price is not None:
        checks.append(lambda p: p.get('price', 0) <= max_price)
    if organic is not None:
        checks.append(lambda p: bool(p.get('organic')) == organic)
    if available is not None:
        checks.append(lambda p: bool(p.get('isAvailable')) == available)
    if farmer_id:
        checks.append(lambda p: p.get('farmerId') == farmer_id)
    if search:
        term = search.lower()
        checks.append(lambda p: term in (p.get('name') or '').lower()
                      or term in (p.get('description') or '').lower())
    return lambda product: all(check(product) for check in checks)


class Repository:
    """CRUD over one array of a snapshot."""
    collection = None
    immutable_fields = ('id',)
    stamps_updates = False

    def __init__(self, snapshot):
        self.records = snapshot[self.collection]

    def list(self, predicate=None):
        if predicate is None:
            return list(self.records)
        return [record for record in self.records if predicate(record)]

    def get(self, record_id):
        return next((r for r in self.records if r.get('id') == record_id), None)

    def update(self, record_id, updates):
        """Merge partial fields into a record; immutable fields are ignored."""
        record = self.get(record_id)
        if record is None:
            return None
        for field, value in updates.items():
            if field not in self.immutable_fields:
                record[field] = value
        if self.stamps_updates:
            record['updatedAt'] = timestamp()
        return record

    def delete(self, record_id):
        record = self.get(record_id)
        if record is None:
            return False
        self.records.remove(record)
        return True

    def _insert(self, record):
        self.records.append(record)
        return record


class UserRepository(Repository):
    collection = 'users'
    immutable_fields = ('id', 'type', 'email', 'passwordHash', 'joinedDate')

    def find_by_email(self, email):
        wanted = (email or '').strip().lower()
        if not wanted:
            return None
        return next((u for u in self.records if (u.get('email') or '').lower() == wanted), None)

    def create(self, user_data, password_hash=None):
        """Create a user; email must be unique."""
        name = (user_data.get('name') or '').strip()
        email = (user_data.get('email') or '').strip()
        user_type = user_data.get('type')

        if not name or not email:
            raise InvalidInput('Name and email are required')
        if user_type not in USER_TYPES:
            raise InvalidInput(f'Unknown user type: {user_type}')
        if self.find_by_email(email):
            raise InvalidInput('Email already registered')

        now = timestamp()
        user = {
            'id': new_id(),
            'name': name,
            'email': email,
            'type': user_type,
            'location': user_data.get('location', ''),
            'avatar': user_data.get('avatar'),
            'phone': user_data.get('phone'),
            'address': user_data.get('address'),
            'preferences': list(user_data.get('preferences') or []),
            'language': user_data.get('language') or 'en',
            'passwordHash': password_hash,
            'joinedDate': now,
            'lastLogin': now,
        }
        if user_type == 'farmer':
            status = user_data.get('subscriptionStatus') or 'none'
            if status not in SUBSCRIPTION_STATUSES:
                raise InvalidInput(f'Unknown subscription status: {status}')
            user['subscriptionStatus'] = status
            user['subscriptionEndDate'] = user_data.get('subscriptionEndDate')
        return self._insert(user)

    def touch_login(self, user):
        user['lastLogin'] = timestamp()
        return user


class ProductRepository(Repository):
    collection = 'products'
    # rating and reviews are only written through set_rating
    immutable_fields = ('id', 'farmerId', 'createdAt', 'rating', 'reviews')
    stamps_updates = True

    def search(self, **filters):
        return self.list(product_predicate(**filters))

    def create(self, farmer, data):
        name = (data.get('name') or '').strip()
        if not name:
            raise InvalidInput('Product name is required')
        price = price_value(data.get('price'))
        inventory = inventory_value(data.get('inventory', 0))

        now = timestamp()
        product = {
            'id': new_id(),
            'farmerId': farmer['id'],
            'farmerName': farmer['name'],
            'name': name,
            'category': data.get('category') or 'Other',
            'price': price,
            'unit': data.get('unit') or 'kg',
            'description': data.get('description') or '',
            'image': data.get('image') or '',
            'inventory': inventory,
            'location': data.get('location') or farmer.get('location') or '',
            'organic': bool(data.get('organic', False)),
            'rating': 0,
            'reviews': 0,
            'isAvailable': bool(data.get('isAvailable', inventory > 0)),
            'harvestDate': data.get('harvestDate'),
            'expiryDate': data.get('expiryDate'),
            'nutritionInfo': data.get('nutritionInfo'),
            'certifications': list(data.get('certifications') or []),
            'createdAt': now,
            'updatedAt': now,
        }
        return self._insert(product)

    def update(self, record_id, updates):
        updates = dict(updates)
        if 'price' in updates:
            updates['price'] = price_value(updates['price'])
        if 'inventory' in updates:
            updates['inventory'] = inventory_value(updates['inventory'])
            product = self.get(record_id)
            if product is not None and 'isAvailable' not in updates:
                restocked = _restocked_availability(product, updates['inventory'])
                if restocked is not None:
                    updates['isAvailable'] = restocked
        return super().update(record_id, updates)

    def set_rating(self, product_id, rating, count):
        product = self.get(product_id)
        if product is None:
            return None
        product['rating'] = rating
        product['reviews'] = count
        product['updatedAt'] = timestamp()
        return product

    def adjust_inventory(self, product, delta):
        """Move stock by ``delta``; selling out marks the product unavailable
        and restocking a sold-out product puts it back on sale."""
        remaining = product['inventory'] + delta
        if remaining < 0:
            raise InvalidInput(
                f"Only {product['inventory']} {product.get('unit') or 'units'} "
                f"of {product['name']} available in stock."
            )
        restocked = _restocked_availability(product, remaining)
        product['inventory'] = remaining
        if restocked is not None:
            product['isAvailable'] = restocked
        product['updatedAt'] = timestamp()
        return product


def _restocked_availability(product, inventory):
    """New ``isAvailable`` implied by moving stock to ``inventory``, or None to keep it."""
    if inventory == 0:
        return False
    # products withdrawn while still in stock stay withdrawn
    if product.get('inventory', 0) == 0 and not product.get('isAvailable'):
        return True
    return None


class CartRepository(Repository):
    collection = 'cart'

    def for_customer(self, customer_id):
        return self.list(lambda item: item.get('customerId') == customer_id)

    def find_line(self, customer_id, item_id):
        item = self.get(item_id)
        if item is None or item.get('customerId') != customer_id:
            return None
        return item

    def add(self, customer_id, product, quantity):
        """Add a product, merging into the customer's existing line for it."""
        quantity = whole_number(quantity, 'Quantity')
        if quantity < 1:
            raise InvalidInput('Quantity must be at least 1')
        if not product.get('isAvailable', True):
            raise InvalidInput(f"{product['name']} is not available")

        existing = next((item for item in self.records
                         if item.get('customerId') == customer_id
                         and item.get('productId') == product['id']), None)
        wanted = quantity + (existing['quantity'] if existing else 0)
        _check_stock(product, wanted)

        if existing:
            existing['quantity'] = wanted
            return existing

        return self._insert({
            'id': new_id(),
            'customerId': customer_id,
            'productId': product['id'],
            'product': dict(product),
            'quantity': quantity,
            'addedAt': timestamp(),
        })

    def update_quantity(self, item, quantity, product=None):
        """Set a line's quantity; zero or less removes the line and returns None."""
        quantity = whole_number(quantity, 'Quantity')
        if quantity <= 0:
            self.records.remove(item)
            return None
        if product is not None:
            _check_stock(product, quantity)
        item['quantity'] = quantity
        return item

    def remove(self, customer_id, item_id):
        item = self.find_line(customer_id, item_id)
        if item is None:
            return False
        self.records.remove(item)
        return True

    def clear(self, customer_id, item_ids=None):
        """Remove the customer's lines, or only those in ``item_ids``."""
        def consumed(item):
            if item.get('customerId') != customer_id:
                return False
            return item_ids is None or item['id'] in item_ids

        before = len(self.records)
        self.records[:] = [item for item in self.records if not consumed(item)]
        return before - len(self.records)


def _check_stock(product, quantity):
    inventory = product.get('inventory', 0)
    if quantity > inventory:
        raise InvalidInput(f'Only {inventory} units of {product["name"]} available in stock.')


class OrderRepository(Repository):
    collection = 'orders'
    immutable_fields = ('id', 'customerId', 'farmerId', 'items', 'total', 'orderDate')
    stamps_updates = True

    def for_user(self, user_id, role):
        field = 'farmerId' if role == 'farmer' else 'customerId'
        return newest_first(self.list(lambda order: order.get(field) == user_id), 'orderDate')

    def create(self, customer_id, farmer_id, items, total, payment_method,
               delivery_address, notes=None):
        now = timestamp()
        return self._insert({
            'id': new_id(),
            'customerId': customer_id,
            'farmerId': farmer_id,
            'items': items,
            'total': total,
            'status': 'pending',
            'orderDate': now,
            'deliveryDate': None,
            'paymentMethod': payment_method,
            'deliveryAddress': delivery_address,
            'notes': notes,
            'updatedAt': now,
        })

    def set_status(self, order, status):
        order['status'] = status
        order['updatedAt'] = timestamp()
        if status == 'delivered':
            order['deliveryDate'] = order['updatedAt']
        return order


class ReviewRepository(Repository):
    collection = 'reviews'

    def for_product(self, product_id):
        return self.list(lambda review: review.get('productId') == product_id)

    def create(self, product_id, customer, rating, comment, images=None):
        rating = whole_number(rating, 'Rating')
        if not 1 <= rating <= 5:
            raise InvalidInput('Rating must be between 1 and 5')
        return self._insert({
            'id': new_id(),
            'productId': product_id,
            'customerId': customer['id'],
            'customerName': customer['name'],
            'rating': rating,
            'comment': (comment or '').strip(),
            'images': list(images or []),
            'createdAt': timestamp(),
            'helpful': 0,
        })

    def mark_helpful(self, review_id):
        review = self.get(review_id)
        if review is None:
            return None
        review['helpful'] = review.get('helpful', 0) + 1
        return review


class NotificationRepository(Repository):
    collection = 'notifications'
    immutable_fields = ('id', 'userId', 'read', 'createdAt')

    def for_user(self, user_id):
        return newest_first(self.list(lambda n: n.get('userId') == user_id), 'createdAt')

    def create(self, user_id, kind, title, message, action_url=None):
        if kind not in NOTIFICATION_TYPES:
            raise InvalidInput(f'Unknown notification type: {kind}')
        return self._insert({
            'id': new_id(),
            'userId': user_id,
            'type': kind,
            'title': title,
            'message': message,
            'read': False,
            'createdAt': timestamp(),
            'actionUrl': action_url,
        })

    def mark_read(self, notification_id):
        # read only ever goes from False to True
        notification = self.get(notification_id)
        if notification is None:
            return None
        notification['read'] = True
        return notification

    def mark_all_read(self, user_id):
        unread = [n for n in self.records if n.get('userId') == user_id and not n.get('read')]
        for notification in unread:
            notification['read'] = True
        return len(unread)

    def unread_count(self, user_id):
        return sum(1 for n in self.records if n.get('userId') == user_id and not n.get('read'))
