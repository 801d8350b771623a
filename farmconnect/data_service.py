"""FarmConnect data service.

Every public method is one unit of work against the persistent store: a read
loads a snapshot, a write loads, mutates through the repositories and saves
once. Workflows that touch several entities (checkout, status changes,
reviews) therefore succeed or fail as a whole.

Methods acting on behalf of a user take an ``actor`` (the user record of the
caller) instead of relying on any stored "current user".
"""
import logging
from contextlib import contextmanager
from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash
from farmconnect.checkout import place_order
from farmconnect.errors import InvalidInput, NotFound, Unauthorized
from farmconnect.order_status import apply_transition
from farmconnect.ratings import refresh_product_rating
from farmconnect.repositories import (UserRepository, ProductRepository, CartRepository,
                                      OrderRepository, ReviewRepository,
                                      NotificationRepository, newest_first)
from farmconnect.sample_data import sample_products, sample_users
from farmconnect.store import PersistentStore
from farmconnect.subscriptions import (apply_subscription, days_until_expiry, refresh_subscription,
                                       require_farmer_features, subscription_is_active)

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ('name', 'phone', 'address', 'location', 'avatar', 'preferences', 'language')

WELCOME_MESSAGES = {
    'farmer': 'Start listing your organic products and connect with customers directly.',
    'consumer': 'Discover fresh organic produce from local farmers in your area.',
}


class Repositories:
    """All repositories bound to one snapshot."""

    def __init__(self, snapshot):
        self.snapshot = snapshot
        self.users = UserRepository(snapshot)
        self.products = ProductRepository(snapshot)
        self.cart = CartRepository(snapshot)
        self.orders = OrderRepository(snapshot)
        self.reviews = ReviewRepository(snapshot)
        self.notifications = NotificationRepository(snapshot)


class DataService:
    """Marketplace operations over the persistent store."""

    def __init__(self, store=None):
        self.store = store or PersistentStore()

    @contextmanager
    def _writing(self):
        with self.store.transaction() as snapshot:
            yield Repositories(snapshot)

    def _reading(self):
        return Repositories(self.store.load())

    # User management

    def authenticate(self, email, password):
        """Return the user whose email and password match, stamping the login."""
        user = self._reading().users.find_by_email(email)
        if user is None or not user.get('passwordHash'):
            return None
        if not check_password_hash(user['passwordHash'], password or ''):
            return None

        with self._writing() as repos:
            user = repos.users.get(user['id'])
            if user is None:
                return None
            repos.users.touch_login(user)
        logger.info('User %s logged in', user['id'])
        return refresh_subscription(user)

    def register(self, user_data, password):
        """Create a user with a hashed password and send the welcome notification."""
        if not password:
            raise InvalidInput('Password is required')
        language = user_data.get('language') or current_app.config['DEFAULT_LANGUAGE']
        self._check_language(language)
        # subscriptions start inactive and are only changed through update_subscription
        data = {k: v for k, v in user_data.items()
                if k not in ('subscriptionStatus', 'subscriptionEndDate')}
        data['language'] = language

        with self._writing() as repos:
            user = repos.users.create(data, password_hash=generate_password_hash(password))
            repos.notifications.create(
                user['id'],
                'system',
                'Welcome to FarmConnect!',
                WELCOME_MESSAGES[user['type']]
            )
        logger.info('Registered %s %s', user['type'], user['id'])
        return user

    def get_user(self, user_id):
        user = self._reading().users.get(user_id)
        return refresh_subscription(user) if user else None

    def update_profile(self, user_id, updates):
        unknown = set(updates) - set(PROFILE_FIELDS)
        if unknown:
            raise InvalidInput(f"Cannot update fields: {', '.join(sorted(unknown))}")
        if 'language' in updates:
            self._check_language(updates['language'])
        if 'name' in updates and not (updates['name'] or '').strip():
            raise InvalidInput('Name cannot be empty')

        with self._writing() as repos:
            user = repos.users.update(user_id, updates)
            if user is None:
                raise NotFound('User not found')
        return user

    def update_subscription(self, user_id, status, end_date=None):
        with self._writing() as repos:
            user = repos.users.get(user_id)
            if user is None:
                raise NotFound('User not found')
            apply_subscription(repos.users, repos.notifications, user, status, end_date,
                               period_days=current_app.config['SUBSCRIPTION_PERIOD_DAYS'])
        return user

    def _check_language(self, language):
        if language not in current_app.config['SUPPORTED_LANGUAGES']:
            raise InvalidInput(f'Unsupported language: {language}')

    # Product management

    def get_products(self, **filters):
        return self._reading().products.search(**filters)

    def get_product(self, product_id):
        return self._reading().products.get(product_id)

    def add_product(self, actor, data):
        with self._writing() as repos:
            farmer = repos.users.get(actor['id'])
            require_farmer_features(farmer)
            product = repos.products.create(farmer, data)
        logger.info('Farmer %s listed product %s', farmer['id'], product['id'])
        return product

    def update_product(self, actor, product_id, updates):
        with self._writing() as repos:
            product = self._owned_product(repos, actor, product_id)
            return repos.products.update(product['id'], updates)

    def delete_product(self, actor, product_id):
        with self._writing() as repos:
            product = self._owned_product(repos, actor, product_id)
            repos.products.delete(product['id'])
        return True

    def _owned_product(self, repos, actor, product_id):
        require_farmer_features(repos.users.get(actor['id']))
        product = repos.products.get(product_id)
        if product is None:
            raise NotFound('Product not found')
        if product['farmerId'] != actor['id']:
            raise Unauthorized('You can only manage your own products')
        return product

    # Cart management

    def get_cart(self, user_id):
        return self._reading().cart.for_customer(user_id)

    def add_to_cart(self, actor, product_id, quantity=1):
        with self._writing() as repos:
            self._require_consumer(repos, actor)
            product = repos.products.get(product_id)
            if product is None:
                raise NotFound('Product not found')
            return repos.cart.add(actor['id'], product, quantity)

    def update_cart_item(self, actor, item_id, quantity):
        """Change a line's quantity; a quantity of zero or less removes it."""
        with self._writing() as repos:
            self._require_consumer(repos, actor)
            item = repos.cart.find_line(actor['id'], item_id)
            if item is None:
                raise NotFound('Cart item not found')
            product = repos.products.get(item['productId'])
            return repos.cart.update_quantity(item, quantity, product)

    def remove_from_cart(self, actor, item_id):
        with self._writing() as repos:
            if not repos.cart.remove(actor['id'], item_id):
                raise NotFound('Cart item not found')
        return True

    def clear_cart(self, actor):
        with self._writing() as repos:
            return repos.cart.clear(actor['id'])

    def _require_consumer(self, repos, actor):
        user = repos.users.get(actor['id'])
        if user is None or user.get('type') != 'consumer':
            raise Unauthorized('Please login as a consumer to add items to cart')
        return user

    # Order management

    def place_order(self, actor, payment_method, delivery_address, notes=None):
        """Check out the actor's cart; returns one order per farmer."""
        with self._writing() as repos:
            return place_order(
                repos.users, repos.products, repos.cart, repos.orders, repos.notifications,
                actor['id'], payment_method, delivery_address, notes,
                payment_methods=current_app.config['PAYMENT_METHODS']
            )

    def get_orders(self, user_id, role):
        return self._reading().orders.for_user(user_id, role)

    def get_order(self, order_id):
        return self._reading().orders.get(order_id)

    def update_order_status(self, actor, order_id, status):
        with self._writing() as repos:
            order = repos.orders.get(order_id)
            if order is None:
                raise NotFound('Order not found')
            return apply_transition(repos.orders, repos.products, repos.notifications,
                                    order, status, actor)

    # Reviews

    def add_review(self, actor, product_id, rating, comment, images=None):
        """Record a review and refresh the product's aggregate rating."""
        with self._writing() as repos:
            customer = repos.users.get(actor['id'])
            if customer is None or customer.get('type') != 'consumer':
                raise Unauthorized('Only consumers can review products')
            product = repos.products.get(product_id)
            if product is None:
                raise NotFound('Product not found')

            review = repos.reviews.create(product_id, customer, rating, comment, images)
            refresh_product_rating(repos.products, repos.reviews, product_id)
            repos.notifications.create(
                product['farmerId'],
                'review',
                'New Review',
                f"{customer['name']} rated {product['name']} {review['rating']}/5",
                action_url=f'/products/{product_id}'
            )
        return review

    def get_reviews(self, product_id):
        return newest_first(self._reading().reviews.for_product(product_id), 'createdAt')

    def mark_review_helpful(self, actor, review_id):
        with self._writing() as repos:
            review = repos.reviews.get(review_id)
            if review is None:
                raise NotFound('Review not found')
            if review['customerId'] == actor['id']:
                raise Unauthorized('You cannot mark your own review as helpful')
            return repos.reviews.mark_helpful(review_id)

    # Notifications

    def add_notification(self, user_id, kind, title, message, action_url=None):
        with self._writing() as repos:
            return repos.notifications.create(user_id, kind, title, message, action_url)

    def get_notifications(self, user_id):
        return self._reading().notifications.for_user(user_id)

    def mark_notification_read(self, actor, notification_id):
        with self._writing() as repos:
            notification = repos.notifications.get(notification_id)
            if notification is None or notification['userId'] != actor['id']:
                raise NotFound('Notification not found')
            return repos.notifications.mark_read(notification_id)

    def mark_all_notifications_read(self, actor):
        with self._writing() as repos:
            return repos.notifications.mark_all_read(actor['id'])

    # Dashboard

    def get_user_summary(self, user_id):
        """Counts shown in the header and farmer dashboard."""
        repos = self._reading()
        user = repos.users.get(user_id)
        if user is None:
            raise NotFound('User not found')

        lines = repos.cart.for_customer(user_id)
        summary = {
            'cartLines': len(lines),
            'cartUnits': sum(line['quantity'] for line in lines),
            'unreadNotifications': repos.notifications.unread_count(user_id),
        }
        if user['type'] == 'farmer':
            products = repos.products.search(farmer_id=user_id)
            orders = repos.orders.for_user(user_id, 'farmer')
            threshold = current_app.config['LOW_STOCK_THRESHOLD']
            summary.update({
                'products': len(products),
                'lowStock': [p['id'] for p in products if p.get('inventory', 0) < threshold],
                'pendingOrders': sum(1 for o in orders if o['status'] == 'pending'),
                'revenue': round(sum(o['total'] for o in orders if o['status'] == 'delivered'), 2),
                'subscriptionActive': subscription_is_active(user),
                'daysUntilExpiry': days_until_expiry(user),
            })
        return summary

    # Sample data

    def initialize_sample_data(self):
        """Load the demo farmer, consumer and products into an empty store."""
        with self._writing() as repos:
            if repos.users.records:
                return False
            repos.users.records.extend(sample_users())
            repos.products.records.extend(sample_products())
        logger.info('Loaded sample marketplace data')
        return True


data_service = DataService()
