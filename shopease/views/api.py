from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..forms import (
    CustomerForm,
    FeedbackForm,
    ProductForm,
    RatingForm,
    ReviewEditForm,
    ReviewForm,
    ReviseFeedbackForm,
)
from ..models import Customer, Product, Rating, Review
from ..models.customer import add_customer, delete_customer
from ..models.product import add_product, delete_product, get_products_by_category
from ..models.rating import add_rating, delete_rating
from ..models.review import add_review, delete_review, edit_review, revise_feedback
from .. import reports

api_bp = Blueprint('api', __name__)


def _invalid(form):
    return jsonify(ok=False, errors=form.errors), 400


def _rejected(error):
    # constraint violation raised by the database (PK / unique / FK / CHECK)
    current_app.logger.error('[API] Database error: %s', error.orig)
    return jsonify(ok=False, error='constraint violation', detail=str(error.orig)), 400


# Products

@api_bp.route('/products', methods=['GET'])
def list_products():
    category = request.args.get('category')
    if category:
        products = get_products_by_category(category)
    else:
        products = Product.query.order_by(Product.id).all()
    return jsonify(ok=True, products=[p.to_dict() for p in products])


@api_bp.route('/products', methods=['POST'])
def create_product():
    form = ProductForm()
    if not form.validate_on_submit():
        return _invalid(form)
    try:
        product = add_product(form.name.data, form.category.data, form.price.data)
    except IntegrityError as e:
        return _rejected(e)
    return jsonify(ok=True, product=product.to_dict()), 201


@api_bp.route('/products/<int:product_id>', methods=['GET'])
def get_product(product_id):
    product = db.get_or_404(Product, product_id)
    return jsonify(ok=True, product=product.to_dict())


@api_bp.route('/products/<int:product_id>', methods=['DELETE'])
def remove_product(product_id):
    db.get_or_404(Product, product_id)
    delete_product(product_id)
    return jsonify(ok=True)


@api_bp.route('/products/<int:product_id>/reviews', methods=['GET'])
def product_reviews(product_id):
    """Reviews of a product, newest first."""
    db.get_or_404(Product, product_id)
    reviews = (Review.query.filter_by(product_id=product_id)
               .order_by(Review.review_date.desc(), Review.id.desc()).all())
    return jsonify(ok=True, reviews=[r.to_dict() for r in reviews])


@api_bp.route('/products/<int:product_id>/feedback', methods=['POST'])
def submit_feedback(product_id):
    form = FeedbackForm()
    if not form.validate_on_submit():
        return _invalid(form)
    try:
        review, rating = add_review(product_id, form.customer_id.data, form.review_text.data, form.rating.data)
    except IntegrityError as e:
        return _rejected(e)
    product = db.session.get(Product, product_id)
    return jsonify(ok=True, review=review.to_dict(), rating=rating.to_dict(),
                   avg_rating=float(product.avg_rating)), 201


# Customers

@api_bp.route('/customers', methods=['GET'])
def list_customers():
    customers = Customer.query.order_by(Customer.id).all()
    return jsonify(ok=True, customers=[c.to_dict() for c in customers])


@api_bp.route('/customers', methods=['POST'])
def create_customer():
    form = CustomerForm()
    if not form.validate_on_submit():
        return _invalid(form)
    try:
        customer = add_customer(form.name.data, form.email.data)
    except IntegrityError as e:
        return _rejected(e)
    return jsonify(ok=True, customer=customer.to_dict()), 201


@api_bp.route('/customers/<int:customer_id>', methods=['DELETE'])
def remove_customer(customer_id):
    db.get_or_404(Customer, customer_id)
    delete_customer(customer_id)
    return jsonify(ok=True)


# Reviews

@api_bp.route('/reviews', methods=['POST'])
def create_review():
    form = ReviewForm()
    if not form.validate_on_submit():
        return _invalid(form)
    review = Review(product_id=form.product_id.data, customer_id=form.customer_id.data,
                    review_text=form.review_text.data)
    if form.review_date.data:
        review.review_date = form.review_date.data
    db.session.add(review)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        return _rejected(e)
    return jsonify(ok=True, review=review.to_dict()), 201


@api_bp.route('/reviews/<int:review_id>', methods=['PATCH'])
def update_review(review_id):
    db.get_or_404(Review, review_id)
    form = ReviewEditForm()
    if not form.validate_on_submit():
        return _invalid(form)
    review = edit_review(review_id, form.review_text.data)
    return jsonify(ok=True, review=review.to_dict())


@api_bp.route('/reviews/<int:review_id>', methods=['DELETE'])
def remove_review(review_id):
    db.get_or_404(Review, review_id)
    delete_review(review_id)
    return jsonify(ok=True)


# Ratings

@api_bp.route('/ratings', methods=['POST'])
def create_rating():
    form = RatingForm()
    if not form.validate_on_submit():
        return _invalid(form)
    try:
        rating = add_rating(form.product_id.data, form.customer_id.data, form.rating.data)
    except IntegrityError as e:
        return _rejected(e)
    product = db.session.get(Product, rating.product_id)
    return jsonify(ok=True, rating=rating.to_dict(), avg_rating=float(product.avg_rating)), 201


@api_bp.route('/ratings/<int:rating_id>', methods=['DELETE'])
def remove_rating(rating_id):
    rating = db.get_or_404(Rating, rating_id)
    product_id = rating.product_id
    delete_rating(rating_id)
    product = db.session.get(Product, product_id)
    return jsonify(ok=True, avg_rating=float(product.avg_rating))


@api_bp.route('/feedback/revise', methods=['POST'])
def revise():
    form = ReviseFeedbackForm()
    if not form.validate_on_submit():
        return _invalid(form)
    try:
        result = revise_feedback(form.rating_id.data, form.rating.data,
                                 form.review_id.data, form.review_text.data)
    except IntegrityError as e:
        return _rejected(e)
    if result is None:
        return jsonify(ok=False, error='not found'), 404
    rating, review = result
    return jsonify(ok=True, rating=rating.to_dict(), review=review.to_dict())


# Reports

def _report_kwargs(name):
    args = request.args
    if name == 'most-reviewed':
        return {'limit': args.get('limit', type=int)}
    if name == 'review-history':
        return {'customer_id': args.get('customer_id', type=int)}
    if name == 'search':
        return {'keyword': args.get('q', '')}
    if name == 'highly-rated':
        return {'threshold': args.get('threshold', type=float)}
    if name == 'by-category':
        return {'categories': args.getlist('category')}
    if name == 'filter':
        return {'any_of': args.getlist('any'), 'none_of': args.getlist('none')}
    return {}


@api_bp.route('/reports/<name>', methods=['GET'])
def run_report(name):
    report = reports.REPORTS.get(name)
    if report is None:
        return jsonify(ok=False, error=f'unknown report {name}'), 404
    rows = report(**_report_kwargs(name))
    return jsonify(ok=True, report=name, rows=rows)
