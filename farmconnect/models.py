"""Database models and entity vocabulary for FarmConnect."""
import uuid
from datetime import datetime, timezone
from flask_login import UserMixin
from farmconnect import db, login_manager

USER_TYPES = ('farmer', 'consumer')
SUBSCRIPTION_STATUSES = ('active', 'expired', 'pending', 'none')
ORDER_STATUSES = ('pending', 'confirmed', 'shipped', 'delivered', 'cancelled')
NOTIFICATION_TYPES = ('order', 'message', 'subscription', 'review', 'system')

# Arrays held by the store document, one per entity
COLLECTIONS = ('users', 'products', 'cart', 'orders', 'reviews', 'notifications')

# Never leaves the data layer
PRIVATE_USER_FIELDS = ('passwordHash',)


def utcnow():
    return datetime.now(timezone.utc)


def timestamp(moment=None):
    """ISO-8601 stamp used for every persisted time field."""
    return (moment or utcnow()).isoformat()


def parse_timestamp(value):
    """Parse a stored stamp; accepts the trailing ``Z`` form of older documents."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def new_id():
    return uuid.uuid4().hex


def empty_document():
    return {name: [] for name in COLLECTIONS}


def public_user(user):
    """Copy of a user record safe to hand to API callers."""
    if user is None:
        return None
    return {k: v for k, v in user.items() if k not in PRIVATE_USER_FIELDS}


class StoreEntry(db.Model):
    """Key-value row holding one serialized store document."""
    __tablename__ = 'store_entries'

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    version = db.Column(db.Integer, nullable=False, default=0)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f'<StoreEntry {self.key} v{self.version}>'


class SessionUser(UserMixin):
    """Flask-Login view of a stored user record."""

    def __init__(self, record):
        self.record = record

    @property
    def id(self):
        return self.record['id']

    @property
    def type(self):
        return self.record.get('type')

    @property
    def is_farmer(self):
        return self.type == 'farmer'

    @property
    def is_consumer(self):
        return self.type == 'consumer'

    def to_dict(self):
        return public_user(self.record)

    def __repr__(self):
        return f'<SessionUser {self.record.get("email")}>'


@login_manager.user_loader
def load_user(user_id):
    """Load user by ID for Flask-Login."""
    from farmconnect.data_service import data_service
    record = data_service.get_user(user_id)
    return SessionUser(record) if record else None
