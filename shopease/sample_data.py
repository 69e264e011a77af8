from datetime import date
from decimal import Decimal

from flask import current_app

from .extensions import db
from .models import Customer, Product, Rating, Review

PRODUCTS = [
    ('Smartphone X200', 'Electronics', Decimal('24999.00')),
    ('Noise Cancelling Headphones', 'Electronics', Decimal('7999.00')),
    ('Classic Sneakers', 'Fashion', Decimal('2999.00')),
    ('Urban Backpack', 'Fashion', Decimal('1599.00')),
]

CUSTOMERS = [
    ('Juan Dela Cruz', 'juan@email.com'),
    ('Maria Santos', 'maria@email.com'),
    ('Pedro Reyes', 'pedro@email.com'),
]

# (product index, customer index, text, date)
REVIEWS = [
    (0, 0, 'Great phone, fast and reliable!', date(2025, 6, 1)),
    (0, 1, 'Battery life could be better.', date(2025, 6, 2)),
    (1, 0, 'Amazing sound quality!', date(2025, 6, 3)),
    (2, 2, 'Very comfortable sneakers.', date(2025, 6, 4)),
]

# (product index, customer index, rating)
RATINGS = [
    (0, 0, 5),
    (0, 1, 3),
    (1, 0, 4),
    (2, 2, 5),
]


def load_sample_data():
    """
    Insert the demo catalogue, customers, reviews and ratings.
    Skipped when products already exist. Returns True if rows were inserted.
    """
    if Product.query.first() is not None:
        current_app.logger.info('[Seed] Products already present, skipping sample data')
        return False

    products = [Product(name=name, category=category, price=price) for name, category, price in PRODUCTS]
    customers = [Customer(name=name, email=email) for name, email in CUSTOMERS]
    db.session.add_all(products + customers)
    db.session.flush()

    for p, c, text, review_date in REVIEWS:
        db.session.add(Review(product_id=products[p].id, customer_id=customers[c].id,
                              review_text=text, review_date=review_date))
    for p, c, score in RATINGS:
        db.session.add(Rating(product_id=products[p].id, customer_id=customers[c].id, rating=score))
    db.session.commit()

    current_app.logger.info('[Seed] Loaded %s products, %s customers, %s reviews, %s ratings',
                            len(PRODUCTS), len(CUSTOMERS), len(REVIEWS), len(RATINGS))
    return True
