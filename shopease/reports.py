"""
Read-only queries over products, customers, reviews and ratings.

Every function returns a list of plain dicts so the API and CLI can serialize
the rows directly.
"""
from decimal import Decimal

from flask import current_app
from sqlalchemy import and_, func, not_, or_, select, union
from sqlalchemy.orm import aliased

from .extensions import db
from .models import Customer, Product, Rating, Review


def _rows(stmt):
    return [_plain(dict(row)) for row in db.session.execute(stmt).mappings()]


def _plain(row):
    for key, value in row.items():
        if isinstance(value, Decimal):
            row[key] = float(value)
        elif hasattr(value, 'isoformat'):
            row[key] = value.isoformat()
    return row


def _round_average(rows, key='avg_rating'):
    for row in rows:
        if row[key] is not None:
            row[key] = round(float(row[key]), 2)
    return rows


def average_product_ratings():
    """Mean rating per product that has at least one rating."""
    stmt = (
        select(Product.id.label('product_id'), Product.name, func.avg(Rating.rating).label('avg_rating'))
        .join(Rating, Rating.product_id == Product.id)
        .group_by(Product.id, Product.name)
        .order_by(Product.id)
    )
    return _round_average(_rows(stmt))


def most_reviewed_products(limit=None):
    review_count = func.count(Review.id).label('review_count')
    stmt = (
        select(Product.id.label('product_id'), Product.name, review_count)
        .join(Review, Review.product_id == Product.id)
        .group_by(Product.id, Product.name)
        .order_by(review_count.desc(), Product.id)
    )
    if limit:
        stmt = stmt.limit(limit)
    return _rows(stmt)


def customer_review_history(customer_id=None):
    stmt = (
        select(
            Customer.name,
            Product.name.label('product'),
            Review.review_text,
            Review.review_date,
        )
        .join(Review, Review.customer_id == Customer.id)
        .join(Product, Review.product_id == Product.id)
        .order_by(Review.review_date.desc(), Review.id.desc())
    )
    if customer_id is not None:
        stmt = stmt.where(Customer.id == customer_id)
    return _rows(stmt)


def reviews_with_ratings():
    """Reviews joined to ratings left by the same customer on the same product."""
    stmt = (
        select(Product.name, Review.review_text, Rating.rating)
        .join(Review, Review.product_id == Product.id)
        .join(Rating, and_(Rating.product_id == Product.id, Rating.customer_id == Review.customer_id))
        .order_by(Review.id, Rating.id)
    )
    return _rows(stmt)


def category_average_ratings():
    """
    Mean rating per category followed by a grand-total row whose category is None,
    i.e. GROUP BY category WITH ROLLUP written portably.
    """
    per_category = (
        select(Product.category, func.avg(Rating.rating).label('avg_rating'))
        .join(Rating, Rating.product_id == Product.id)
        .group_by(Product.category)
        .order_by(Product.category)
    )
    overall = db.session.execute(
        select(func.avg(Rating.rating)).join(Product, Rating.product_id == Product.id)
    ).scalar()

    rows = _rows(per_category)
    if rows:
        rows.append({'category': None, 'avg_rating': overall})
    return _round_average(rows)


def search_reviews(keyword):
    stmt = (
        select(Review.id, Review.product_id, Review.customer_id, Review.review_text, Review.review_date)
        .where(Review.review_text.icontains(keyword, autoescape=True))
        .order_by(Review.review_date.desc(), Review.id.desc())
    )
    return _rows(stmt)


def highly_rated_products(threshold=None):
    """Names of products whose mean rating is strictly above the threshold."""
    if threshold is None:
        threshold = current_app.config.get('HIGH_RATING_THRESHOLD', 4)
    rated_above = (
        select(Rating.product_id)
        .group_by(Rating.product_id)
        .having(func.avg(Rating.rating) > threshold)
    )
    stmt = select(Product.id.label('product_id'), Product.name).where(Product.id.in_(rated_above)).order_by(Product.id)
    return _rows(stmt)


def reviews_by_categories(categories):
    """Distinct (review_text, category) pairs across the given categories."""
    selects = [
        select(Review.review_text, Product.category)
        .join(Product, Review.product_id == Product.id)
        .where(Product.category == category)
        for category in categories
    ]
    if not selects:
        return []
    stmt = selects[0].distinct() if len(selects) == 1 else union(*selects)
    return _rows(stmt)


def filter_reviews(any_of=(), none_of=()):
    """Reviews mentioning at least one word from any_of and no word from none_of."""
    stmt = select(Review.id, Review.product_id, Review.customer_id, Review.review_text, Review.review_date)
    if any_of:
        stmt = stmt.where(or_(*[Review.review_text.icontains(word, autoescape=True) for word in any_of]))
    for word in none_of:
        stmt = stmt.where(not_(Review.review_text.icontains(word, autoescape=True)))
    return _rows(stmt.order_by(Review.id))


def co_reviewers():
    """Pairs of different customers who reviewed the same product."""
    first, second = aliased(Customer), aliased(Customer)
    r1, r2 = aliased(Review), aliased(Review)
    stmt = (
        select(first.name.label('customer1'), second.name.label('customer2'), r1.product_id)
        .join(r1, first.id == r1.customer_id)
        .join(r2, and_(r1.product_id == r2.product_id, r1.customer_id != r2.customer_id))
        .join(second, r2.customer_id == second.id)
        .order_by(r1.product_id, r1.id, r2.id)
    )
    return _rows(stmt)


REPORTS = {
    'average-ratings': average_product_ratings,
    'most-reviewed': most_reviewed_products,
    'review-history': customer_review_history,
    'reviews-with-ratings': reviews_with_ratings,
    'category-averages': category_average_ratings,
    'search': search_reviews,
    'highly-rated': highly_rated_products,
    'by-category': reviews_by_categories,
    'filter': filter_reviews,
    'co-reviewers': co_reviewers,
}
