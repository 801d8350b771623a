import pytest
from farmconnect import create_app, db
from farmconnect.data_service import data_service

PASSWORD = 'green-harvest-42'


@pytest.fixture
def app():
    app = create_app('testing')
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_context(app):
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def service(app_context):
    return data_service


@pytest.fixture
def farmer(service):
    user = service.register({
        'name': 'Green Valley Farm',
        'email': 'farmer@greenvalley.com',
        'type': 'farmer',
        'location': 'Punjab, India',
    }, PASSWORD)
    return service.update_subscription(user['id'], 'active')


@pytest.fixture
def second_farmer(service):
    user = service.register({
        'name': 'Sahyadri Bees',
        'email': 'hello@sahyadribees.in',
        'type': 'farmer',
        'location': 'Pune, Maharashtra',
    }, PASSWORD)
    return service.update_subscription(user['id'], 'active')


@pytest.fixture
def consumer(service):
    return service.register({
        'name': 'Rajesh Kumar',
        'email': 'rajesh@example.com',
        'type': 'consumer',
        'location': 'Mumbai, India',
        'address': 'Bandra West, Mumbai 400050',
    }, PASSWORD)


@pytest.fixture
def tomatoes(service, farmer):
    return service.add_product(farmer, {
        'name': 'Organic Tomatoes',
        'category': 'Vegetables',
        'price': 45,
        'unit': 'kg',
        'inventory': 50,
        'organic': True,
    })


@pytest.fixture
def seeded(app):
    with app.app_context():
        data_service.initialize_sample_data()
    return app
