from datetime import date

from flask import current_app

from ..extensions import db
from .base import BaseModel
from .rating import Rating, update_avg_rating


class Review(BaseModel):
    __tablename__ = 'reviews'

    product_id = db.Column(db.Integer, db.ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    customer_id = db.Column(db.Integer, db.ForeignKey('customers.id', ondelete='CASCADE'), nullable=False)
    review_text = db.Column(db.Text, nullable=False)
    review_date = db.Column(db.Date, nullable=False, default=date.today)

    def __repr__(self):
        return f'<Review {self.id} product={self.product_id} customer={self.customer_id}>'


def add_review(product_id, customer_id, text, rating, review_date=None):
    """
    Insert a review and a rating for the same (product, customer) pair and
    refresh the product's cached average.

    Both rows go out in one commit: if either insert is rejected the session is
    rolled back and neither persists.
    """
    review = Review(product_id=product_id, customer_id=customer_id, review_text=text)
    if review_date is not None:
        review.review_date = review_date
    score = Rating(product_id=product_id, customer_id=customer_id, rating=rating)
    db.session.add_all([review, score])
    try:
        db.session.flush()
        update_avg_rating(product_id)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    current_app.logger.info('[Feedback] Added review id=%s rating id=%s for product id=%s',
                            review.id, score.id, product_id)
    return review, score


def edit_review(review_id, text):
    review = db.session.get(Review, review_id)
    if review is None:
        return None
    review.review_text = text
    db.session.commit()
    current_app.logger.info('[Feedback] Edited review id=%s', review_id)
    return review


def delete_review(review_id):
    review = db.session.get(Review, review_id)
    if review is None:
        return False
    db.session.delete(review)
    db.session.commit()
    current_app.logger.info('[Feedback] Deleted review id=%s', review_id)
    return True


def revise_feedback(rating_id, score, review_id, text):
    """
    Change a rating's score and a review's text atomically.

    Returns (rating, review), or None when either row does not exist. The rating
    update trigger refreshes the product average inside the same transaction.
    """
    rating = db.session.get(Rating, rating_id)
    review = db.session.get(Review, review_id)
    if rating is None or review is None:
        return None
    try:
        rating.rating = score
        review.review_text = text
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    current_app.logger.info('[Feedback] Revised rating id=%s and review id=%s', rating_id, review_id)
    return rating, review
