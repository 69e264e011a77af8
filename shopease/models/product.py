from flask import current_app

from ..extensions import db
from .base import BaseModel


class Product(BaseModel):
    __tablename__ = 'products'

    name = db.Column(db.String(100), nullable=False)
    category = db.Column(db.String(50), nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    # cached mean of ratings.rating, written only by the rating triggers / update_avg_rating
    avg_rating = db.Column(db.Numeric(3, 2), nullable=False, default=0, server_default='0')

    reviews = db.relationship('Review', backref='product', cascade='all, delete-orphan', passive_deletes=True)
    ratings = db.relationship('Rating', backref='product', cascade='all, delete-orphan', passive_deletes=True)

    __table_args__ = (
        db.CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
        db.Index('idx_product_name', 'name'),
    )

    def __repr__(self):
        return f'<Product {self.id} {self.name!r}>'


def add_product(name, category, price):
    product = Product(name=name, category=category, price=price)
    db.session.add(product)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    current_app.logger.info('[Catalog] Added product id=%s name=%s', product.id, name)
    return product


def delete_product(product_id):
    """Delete a product; its reviews and ratings go with it (ON DELETE CASCADE)."""
    product = db.session.get(Product, product_id)
    if product is None:
        return False
    db.session.delete(product)
    db.session.commit()
    current_app.logger.info('[Catalog] Deleted product id=%s', product_id)
    return True


def get_products_by_category(category):
    return Product.query.filter_by(category=category).order_by(Product.id).all()
