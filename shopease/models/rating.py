from flask import current_app
from sqlalchemy import func, select, update

from ..extensions import db
from .base import BaseModel
from .product import Product


class Rating(BaseModel):
    __tablename__ = 'ratings'

    product_id = db.Column(db.Integer, db.ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    customer_id = db.Column(db.Integer, db.ForeignKey('customers.id', ondelete='CASCADE'), nullable=False)
    rating = db.Column(db.Integer, nullable=False)  # 1..5

    __table_args__ = (
        db.CheckConstraint('rating BETWEEN 1 AND 5', name='ck_ratings_rating_range'),
    )

    def __repr__(self):
        return f'<Rating {self.id} product={self.product_id} rating={self.rating}>'


def average_rating_expression(product_id):
    """Mean rating of a product rounded to 2 places, 0 when it has no ratings."""
    return (
        select(func.coalesce(func.round(func.avg(Rating.rating), 2), 0))
        .where(Rating.product_id == product_id)
        .scalar_subquery()
    )


def update_avg_rating(product_id):
    """
    Recompute and store products.avg_rating for a single product.

    Same statement the UpdateAvgRating procedure / rating triggers run inside the
    database; exposed here for callers that need it without a rating write.
    Does not commit.
    """
    db.session.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(avg_rating=average_rating_expression(product_id))
    )
    value = db.session.execute(select(Product.avg_rating).where(Product.id == product_id)).scalar()
    current_app.logger.debug('[Ratings] product id=%s avg_rating=%s', product_id, value)
    return value


def recompute_all_ratings():
    product_ids = db.session.execute(select(Product.id).order_by(Product.id)).scalars().all()
    for product_id in product_ids:
        update_avg_rating(product_id)
    db.session.commit()
    current_app.logger.info('[Ratings] Recomputed averages for %s products', len(product_ids))
    return len(product_ids)


def add_rating(product_id, customer_id, score):
    rating = Rating(product_id=product_id, customer_id=customer_id, rating=score)
    db.session.add(rating)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    current_app.logger.info('[Ratings] Added rating id=%s product id=%s score=%s', rating.id, product_id, score)
    return rating


def delete_rating(rating_id):
    rating = db.session.get(Rating, rating_id)
    if rating is None:
        return False
    product_id = rating.product_id
    db.session.delete(rating)
    db.session.commit()
    current_app.logger.info('[Ratings] Deleted rating id=%s product id=%s', rating_id, product_id)
    return True
