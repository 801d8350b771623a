from datetime import timedelta
import pytest
from farmconnect.errors import InvalidInput, Unauthorized
from farmconnect.models import parse_timestamp, timestamp, utcnow
from farmconnect.subscriptions import (days_until_expiry, refresh_subscription,
                                       subscription_is_active)


@pytest.fixture
def new_farmer(service):
    return service.register({'name': 'Nilgiri Tea Estate', 'email': 'tea@nilgiri.in',
                             'type': 'farmer', 'location': 'Ooty, Tamil Nadu'}, 'first-flush-tea')


def test_unsubscribed_farmer_cannot_list_products(service, new_farmer):
    assert new_farmer['subscriptionStatus'] == 'none'

    with pytest.raises(Unauthorized):
        service.add_product(new_farmer, {'name': 'Green Tea', 'price': 300, 'inventory': 10})


def test_activation_sets_end_date_and_notifies(service, new_farmer):
    farmer = service.update_subscription(new_farmer['id'], 'active')

    assert farmer['subscriptionStatus'] == 'active'
    remaining = parse_timestamp(farmer['subscriptionEndDate']) - utcnow()
    assert timedelta(days=29) < remaining <= timedelta(days=30)

    titles = [n['title'] for n in service.get_notifications(farmer['id'])]
    assert 'Subscription Updated' in titles

    product = service.add_product(farmer, {'name': 'Green Tea', 'price': 300, 'inventory': 10})
    assert product['farmerId'] == farmer['id']


def test_explicit_end_date_is_kept(service, new_farmer):
    farmer = service.update_subscription(new_farmer['id'], 'active', '2099-01-01T00:00:00Z')

    assert farmer['subscriptionEndDate'] == '2099-01-01T00:00:00+00:00'


def test_bad_end_date_is_rejected(service, new_farmer):
    with pytest.raises(InvalidInput):
        service.update_subscription(new_farmer['id'], 'active', 'next tuesday')


def test_unknown_status_is_rejected(service, new_farmer):
    with pytest.raises(InvalidInput):
        service.update_subscription(new_farmer['id'], 'lifetime')


def test_lapsed_subscription_reads_as_expired(service, farmer, tomatoes):
    yesterday = timestamp(utcnow() - timedelta(days=1))
    service.update_subscription(farmer['id'], 'active', yesterday)

    assert service.get_user(farmer['id'])['subscriptionStatus'] == 'expired'
    with pytest.raises(Unauthorized):
        service.update_product(farmer, tomatoes['id'], {'price': 50})


def test_consumers_have_no_subscription(service, consumer):
    with pytest.raises(Unauthorized):
        service.update_subscription(consumer['id'], 'active')


def test_subscription_is_active_rules():
    now = utcnow()
    farmer = {'type': 'farmer', 'subscriptionStatus': 'active',
              'subscriptionEndDate': timestamp(now + timedelta(days=3))}

    assert subscription_is_active(farmer, now)
    assert not subscription_is_active(farmer, now + timedelta(days=4))
    assert not subscription_is_active(dict(farmer, subscriptionStatus='pending'), now)
    assert not subscription_is_active(dict(farmer, type='consumer'), now)
    assert subscription_is_active(dict(farmer, subscriptionEndDate=None), now)


def test_days_until_expiry():
    now = utcnow()
    farmer = {'subscriptionEndDate': timestamp(now + timedelta(days=12, hours=2))}

    assert days_until_expiry(farmer, now) == 12
    assert days_until_expiry(farmer, now + timedelta(days=20)) == 0
    assert days_until_expiry({'subscriptionEndDate': None}, now) is None


def test_refresh_only_expires_lapsed_active_subscriptions():
    now = utcnow()
    past = timestamp(now - timedelta(days=1))

    assert refresh_subscription({'type': 'farmer', 'subscriptionStatus': 'active',
                                 'subscriptionEndDate': past}, now)['subscriptionStatus'] == 'expired'
    assert refresh_subscription({'type': 'farmer', 'subscriptionStatus': 'pending',
                                 'subscriptionEndDate': past}, now)['subscriptionStatus'] == 'pending'
