"""Demo marketplace data loaded by ``flask seed-data``."""
from datetime import timedelta
from werkzeug.security import generate_password_hash
from farmconnect.models import timestamp, utcnow

# Password of both demo accounts
DEMO_PASSWORD = 'demo1234'


def sample_users():
    now = utcnow()
    return [
        {
            'id': '1',
            'name': 'Green Valley Farm',
            'email': 'demo@greenvalley.com',
            'type': 'farmer',
            'location': 'Punjab, India',
            'avatar': None,
            'phone': '+91 98765 43210',
            'address': 'Village Kharar, Punjab 140301',
            'preferences': [],
            'language': 'en',
            'subscriptionStatus': 'active',
            'subscriptionEndDate': timestamp(now + timedelta(days=30)),
            'passwordHash': generate_password_hash(DEMO_PASSWORD),
            'joinedDate': '2023-01-15T00:00:00+00:00',
            'lastLogin': timestamp(now),
        },
        {
            'id': '2',
            'name': 'Rajesh Kumar',
            'email': 'consumer@example.com',
            'type': 'consumer',
            'location': 'Mumbai, India',
            'avatar': None,
            'phone': '+91 87654 32109',
            'address': 'Bandra West, Mumbai 400050',
            'preferences': ['organic', 'local', 'vegetables'],
            'language': 'en',
            'passwordHash': generate_password_hash(DEMO_PASSWORD),
            'joinedDate': '2023-03-20T00:00:00+00:00',
            'lastLogin': timestamp(now),
        },
    ]


def sample_products():
    now = timestamp()
    return [
        {
            'id': '1',
            'farmerId': '1',
            'farmerName': 'Green Valley Farm',
            'name': 'Organic Tomatoes',
            'category': 'Vegetables',
            'price': 45,
            'unit': 'kg',
            'description': 'Fresh, vine-ripened organic tomatoes. Rich in vitamins and perfect for daily cooking.',
            'image': 'https://images.unsplash.com/photo-1546470427-e5380b6d8833?w=400&h=300&fit=crop',
            'inventory': 50,
            'location': 'Punjab, India',
            'organic': True,
            'rating': 4.7,
            'reviews': 23,
            'isAvailable': True,
            'harvestDate': '2024-01-10T00:00:00+00:00',
            'expiryDate': '2024-01-25T00:00:00+00:00',
            'nutritionInfo': 'High in Vitamin C, Lycopene, and Potassium',
            'certifications': ['USDA Organic', 'FSSAI Certified'],
            'createdAt': '2024-01-01T00:00:00+00:00',
            'updatedAt': now,
        },
        {
            'id': '2',
            'farmerId': '1',
            'farmerName': 'Green Valley Farm',
            'name': 'Fresh Spinach',
            'category': 'Vegetables',
            'price': 25,
            'unit': 'kg',
            'description': 'Freshly harvested organic spinach leaves. Rich in iron and perfect for healthy meals.',
            'image': 'https://images.unsplash.com/photo-1576045057995-568f588f82fb?w=400&h=300&fit=crop',
            'inventory': 30,
            'location': 'Punjab, India',
            'organic': True,
            'rating': 4.9,
            'reviews': 15,
            'isAvailable': True,
            'harvestDate': '2024-01-12T00:00:00+00:00',
            'expiryDate': '2024-01-20T00:00:00+00:00',
            'nutritionInfo': 'High in Iron, Vitamin K, and Folate',
            'certifications': ['USDA Organic', 'FSSAI Certified'],
            'createdAt': '2024-01-01T00:00:00+00:00',
            'updatedAt': now,
        },
    ]
