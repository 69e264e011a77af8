from flask import current_app

from ..extensions import db
from .base import BaseModel


class Customer(BaseModel):
    __tablename__ = 'customers'

    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(100), unique=True, nullable=False)

    reviews = db.relationship('Review', backref='customer', cascade='all, delete-orphan', passive_deletes=True)
    ratings = db.relationship('Rating', backref='customer', cascade='all, delete-orphan', passive_deletes=True)

    def __repr__(self):
        return f'<Customer {self.id} {self.email}>'


def add_customer(name, email):
    customer = Customer(name=name, email=email)
    db.session.add(customer)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    current_app.logger.info('[Customers] Added customer id=%s', customer.id)
    return customer


def delete_customer(customer_id):
    """
    Delete a customer together with their reviews and ratings.

    MySQL does not fire triggers for rows removed by a foreign-key cascade, so the
    averages of every product the customer rated are recomputed here explicitly.
    """
    from .rating import Rating, update_avg_rating

    customer = db.session.get(Customer, customer_id)
    if customer is None:
        return False

    rated_product_ids = [
        row.product_id
        for row in db.session.query(Rating.product_id).filter(Rating.customer_id == customer_id).distinct()
    ]
    db.session.delete(customer)
    try:
        db.session.flush()
        for product_id in rated_product_ids:
            update_avg_rating(product_id)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    current_app.logger.info('[Customers] Deleted customer id=%s, recomputed products=%s',
                            customer_id, rated_product_ids)
    return True
