"""FarmConnect Flask Application Factory."""
import click
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from werkzeug.exceptions import HTTPException
from config import config

db = SQLAlchemy()
login_manager = LoginManager()


@login_manager.unauthorized_handler
def unauthorized():
    """Answer requests without a session with 401 instead of a redirect."""
    return jsonify({'error': 'Please log in to continue.', 'kind': 'Unauthenticated'}), 401


def create_app(config_name='default'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)

    # Register blueprints
    from farmconnect.routes.main import main_bp
    from farmconnect.routes.auth import auth_bp
    from farmconnect.routes.products import products_bp
    from farmconnect.routes.cart import cart_bp
    from farmconnect.routes.orders import orders_bp
    from farmconnect.routes.reviews import reviews_bp
    from farmconnect.routes.notifications import notifications_bp
    from farmconnect.routes.dashboard import dashboard_bp
    from farmconnect.routes.settings import settings_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(products_bp, url_prefix='/products')
    app.register_blueprint(cart_bp, url_prefix='/cart')
    app.register_blueprint(orders_bp, url_prefix='/orders')
    app.register_blueprint(reviews_bp, url_prefix='/reviews')
    app.register_blueprint(notifications_bp, url_prefix='/notifications')
    app.register_blueprint(dashboard_bp, url_prefix='/dashboard')
    app.register_blueprint(settings_bp, url_prefix='/settings')

    # Register error handlers
    from farmconnect.errors import MarketplaceError

    @app.errorhandler(MarketplaceError)
    def marketplace_error(error):
        """Render data layer failures with their own status code."""
        if error.status_code >= 500:
            app.logger.error('Request failed: %s', error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def http_error(error):
        """Handle 4xx/5xx raised by Flask itself as JSON."""
        return jsonify({'error': error.description, 'kind': error.name}), error.code

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors - internal server error."""
        db.session.rollback()  # Rollback any pending database transactions
        app.logger.exception('Unhandled error')
        return jsonify({'error': 'Internal server error', 'kind': 'InternalServerError'}), 500

    @app.cli.command('seed-data')
    def seed_data():
        """Load the demo farmer, consumer and products."""
        from farmconnect.data_service import data_service
        if data_service.initialize_sample_data():
            click.echo('Sample data loaded.')
        else:
            click.echo('Store already has users, nothing loaded.')

    # Create database tables
    with app.app_context():
        from farmconnect import models  # noqa: F401
        db.create_all()

    return app
