"""Product routes for FarmConnect - Browsing and farmer listings."""
from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required
from farmconnect.data_service import data_service
from farmconnect.errors import NotFound
from farmconnect.routes.helpers import actor, arg_bool, arg_float, json_body

products_bp = Blueprint('products', __name__)


@products_bp.route('/', strict_slashes=False)
def list_products():
    """List products matching every given filter."""
    products = data_service.get_products(
        category=request.args.get('category'),
        location=request.args.get('location'),
        min_price=arg_float('minPrice'),
        max_price=arg_float('maxPrice'),
        organic=arg_bool('organic'),
        available=arg_bool('available'),
        farmer_id=request.args.get('farmerId'),
        search=request.args.get('search')
    )
    return jsonify(products)


@products_bp.route('/<product_id>')
def product_detail(product_id):
    """Product details with reviews and related products."""
    product = data_service.get_product(product_id)
    if product is None:
        raise NotFound('Product not found')

    related = [
        p for p in data_service.get_products(category=product['category'], available=True)
        if p['id'] != product_id
    ][:4]
    return jsonify({
        'product': product,
        'lowStock': product['inventory'] < current_app.config['LOW_STOCK_THRESHOLD'],
        'reviews': data_service.get_reviews(product_id),
        'related': related,
    })


@products_bp.route('/', methods=['POST'], strict_slashes=False)
@login_required
def add_product():
    """List a new product (farmers with an active subscription)."""
    product = data_service.add_product(actor(), json_body())
    return jsonify(product), 201


@products_bp.route('/<product_id>', methods=['PATCH'])
@login_required
def update_product(product_id):
    """Update one of the farmer's products."""
    product = data_service.update_product(actor(), product_id, json_body())
    return jsonify(product)


@products_bp.route('/<product_id>', methods=['DELETE'])
@login_required
def delete_product(product_id):
    """Delete one of the farmer's products."""
    data_service.delete_product(actor(), product_id)
    return jsonify({'success': True})
