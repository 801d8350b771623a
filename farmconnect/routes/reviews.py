"""Review routes for FarmConnect."""
from flask import Blueprint, jsonify, request
from flask_login import login_required
from farmconnect.data_service import data_service
from farmconnect.errors import InvalidInput
from farmconnect.routes.helpers import actor, json_body

reviews_bp = Blueprint('reviews', __name__)


@reviews_bp.route('/', methods=['POST'], strict_slashes=False)
@login_required
def add_review():
    """Review a product."""
    data = json_body()
    if not data.get('productId'):
        raise InvalidInput('productId is required')

    review = data_service.add_review(
        actor(),
        data['productId'],
        data.get('rating'),
        data.get('comment'),
        data.get('images')
    )
    return jsonify(review), 201


@reviews_bp.route('/', strict_slashes=False)
def list_reviews():
    """Reviews of a product, newest first."""
    product_id = request.args.get('productId')
    if not product_id:
        raise InvalidInput('productId is required')
    return jsonify(data_service.get_reviews(product_id))


@reviews_bp.route('/<review_id>/helpful', methods=['POST'])
@login_required
def helpful(review_id):
    """Count a review as helpful."""
    return jsonify(data_service.mark_review_helpful(actor(), review_id))
