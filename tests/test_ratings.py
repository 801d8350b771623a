import pytest
from farmconnect.errors import InvalidInput, NotFound, Unauthorized
from farmconnect.ratings import average_rating


@pytest.mark.parametrize('ratings, expected', [
    ([4, 5], (4.5, 2)),
    ([4, 5, 3], (4.0, 3)),
    ([4, 4, 4, 5], (4.3, 4)),
    ([1, 2], (1.5, 2)),
    ([5, 4, 4], (4.3, 3)),
    ([], (0, 0)),
])
def test_average_rating(ratings, expected):
    assert average_rating(ratings) == expected


@pytest.fixture
def second_consumer(service):
    return service.register({'name': 'Meera Iyer', 'email': 'meera@example.com',
                             'type': 'consumer'}, 'another-pass')


def test_reviews_refresh_product_rating(service, consumer, second_consumer, tomatoes):
    service.add_review(consumer, tomatoes['id'], 4, 'Good')
    service.add_review(second_consumer, tomatoes['id'], 5, 'Excellent')
    assert service.get_product(tomatoes['id'])['rating'] == 4.5

    service.add_review(consumer, tomatoes['id'], 3, 'Smaller this week')

    product = service.get_product(tomatoes['id'])
    assert product['rating'] == 4.0
    assert product['reviews'] == 3
    assert len(service.get_reviews(tomatoes['id'])) == 3


def test_review_records_customer_and_notifies_farmer(service, farmer, consumer, tomatoes):
    review = service.add_review(consumer, tomatoes['id'], 5, '  Juicy and fresh  ')

    assert review['customerName'] == 'Rajesh Kumar'
    assert review['comment'] == 'Juicy and fresh'
    assert review['helpful'] == 0

    reviews = [n for n in service.get_notifications(farmer['id']) if n['type'] == 'review']
    assert len(reviews) == 1
    assert reviews[0]['message'] == 'Rajesh Kumar rated Organic Tomatoes 5/5'


def test_farmers_cannot_review(service, farmer, tomatoes):
    with pytest.raises(Unauthorized):
        service.add_review(farmer, tomatoes['id'], 5, 'Best in Punjab')


def test_review_of_missing_product(service, consumer):
    with pytest.raises(NotFound):
        service.add_review(consumer, 'gone', 5, 'Great')


@pytest.mark.parametrize('rating', [0, 6, 4.5, 'five'])
def test_out_of_range_rating_leaves_product_unchanged(service, consumer, tomatoes, rating):
    with pytest.raises(InvalidInput):
        service.add_review(consumer, tomatoes['id'], rating, 'Hmm')

    product = service.get_product(tomatoes['id'])
    assert product['rating'] == 0
    assert product['reviews'] == 0
    assert service.get_reviews(tomatoes['id']) == []


def test_product_update_cannot_overwrite_rating(service, farmer, consumer, tomatoes):
    service.add_review(consumer, tomatoes['id'], 4, 'Good')

    service.update_product(farmer, tomatoes['id'], {'rating': 5, 'reviews': 100})

    product = service.get_product(tomatoes['id'])
    assert product['rating'] == 4.0
    assert product['reviews'] == 1


def test_helpful_counter(service, farmer, consumer, second_consumer, tomatoes):
    review = service.add_review(consumer, tomatoes['id'], 4, 'Good')

    service.mark_review_helpful(second_consumer, review['id'])
    assert service.mark_review_helpful(farmer, review['id'])['helpful'] == 2

    with pytest.raises(NotFound):
        service.mark_review_helpful(second_consumer, 'missing')


def test_author_cannot_mark_own_review_helpful(service, consumer, tomatoes):
    review = service.add_review(consumer, tomatoes['id'], 4, 'Good')

    with pytest.raises(Unauthorized):
        service.mark_review_helpful(consumer, review['id'])
    assert service.get_reviews(tomatoes['id'])[0]['helpful'] == 0
