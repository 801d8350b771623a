"""Farmer subscription rules."""
from datetime import timedelta
from farmconnect.errors import InvalidInput, Unauthorized
from farmconnect.models import SUBSCRIPTION_STATUSES, parse_timestamp, timestamp, utcnow


def subscription_is_active(user, now=None):
    """Active farmers may list and manage products."""
    if user.get('type') != 'farmer' or user.get('subscriptionStatus') != 'active':
        return False
    end = parse_timestamp(user.get('subscriptionEndDate'))
    return end is None or end > (now or utcnow())


def refresh_subscription(user, now=None):
    """Report an active subscription past its end date as expired."""
    if user.get('subscriptionStatus') == 'active' and not subscription_is_active(user, now):
        user['subscriptionStatus'] = 'expired'
    return user


def days_until_expiry(user, now=None):
    end = parse_timestamp(user.get('subscriptionEndDate'))
    if end is None:
        return None
    return max(0, (end - (now or utcnow())).days)


def require_farmer_features(user):
    if user is None or user.get('type') != 'farmer':
        raise Unauthorized('Only farmers can manage products')
    if not subscription_is_active(user):
        raise Unauthorized('An active farmer subscription is required')


def apply_subscription(users, notifications, user, status, end_date=None, period_days=30):
    """Set a farmer's subscription and notify them."""
    if user.get('type') != 'farmer':
        raise Unauthorized('Only farmers have subscriptions')
    if status not in SUBSCRIPTION_STATUSES:
        raise InvalidInput(f'Unknown subscription status: {status}')

    if end_date:
        try:
            end_date = timestamp(parse_timestamp(end_date))
        except (ValueError, AttributeError):
            raise InvalidInput(f'Invalid subscription end date: {end_date}') from None
    elif status == 'active':
        end_date = timestamp(utcnow() + timedelta(days=period_days))

    users.update(user['id'], {'subscriptionStatus': status, 'subscriptionEndDate': end_date})
    notifications.create(
        user['id'],
        'subscription',
        'Subscription Updated',
        f'Your farmer subscription is now {status}'
    )
    return user
