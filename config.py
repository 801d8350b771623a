"""Application configuration."""
import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY', 'farmconnect-secret-key-change-in-production')
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///farmconnect.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Key of the JSON document holding every marketplace entity
    STORE_KEY = os.environ.get('STORE_KEY', 'farmconnect_data')

    # Marketplace settings
    SUBSCRIPTION_PERIOD_DAYS = 30
    PAYMENT_METHODS = ['cod', 'card', 'upi', 'netbanking', 'wallet']
    LOW_STOCK_THRESHOLD = 10

    # App settings
    DEFAULT_LANGUAGE = 'en'
    SUPPORTED_LANGUAGES = [
        'en', 'hi', 'bn', 'te', 'mr', 'ta', 'gu', 'ur', 'kn', 'or', 'ml', 'pa',
        'as', 'sa', 'ks', 'sd', 'ne', 'kok', 'mni', 'brx', 'sat', 'mai', 'doi'
    ]


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    SECRET_KEY = 'farmconnect-testing'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    STORE_KEY = 'farmconnect_test'


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
