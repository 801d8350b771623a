"""Product rating aggregation."""
from decimal import Decimal, ROUND_HALF_UP


def average_rating(ratings):
    """Mean of ``ratings`` rounded half-up to one decimal, with the count."""
    if not ratings:
        return 0, 0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)), len(ratings)


def refresh_product_rating(products, reviews, product_id):
    """Recompute a product's rating from all of its reviews."""
    ratings = [review['rating'] for review in reviews.for_product(product_id)]
    if not ratings:
        return products.get(product_id)
    rating, count = average_rating(ratings)
    return products.set_rating(product_id, rating, count)
