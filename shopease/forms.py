from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField
from wtforms.fields.datetime import DateField
from wtforms.fields.numeric import IntegerField, DecimalField
from wtforms.validators import DataRequired, Length, NumberRange, Optional, Regexp, StopValidation


def whole_number(form, field):
    """Reject JSON booleans, fractions and non-digit strings before IntegerField truncates them."""
    if not field.raw_data:
        return
    raw = field.raw_data[0]
    if isinstance(raw, bool) or isinstance(raw, float) or (
            isinstance(raw, str) and not raw.strip().lstrip('-').isdigit()):
        raise StopValidation('Must be a whole number.')


class JsonForm(FlaskForm):
    """FlaskForm fed from a JSON body; API clients carry no CSRF token."""

    class Meta:
        csrf = False


class ProductForm(JsonForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=100)])
    category = StringField('Category', validators=[DataRequired(), Length(max=50)])
    price = DecimalField('Price', validators=[NumberRange(min=0)])


class CustomerForm(JsonForm):
    name = StringField('Name', validators=[DataRequired(), Length(max=100)])
    email = StringField('Email', validators=[
        DataRequired(),
        Length(max=100),
        Regexp(r'^[^@\s]+@[^@\s]+$', message='Invalid email address.'),
    ])


class ReviewForm(JsonForm):
    product_id = IntegerField('Product', validators=[DataRequired()])
    customer_id = IntegerField('Customer', validators=[DataRequired()])
    review_text = TextAreaField('Review', validators=[DataRequired()])
    review_date = DateField('Date', validators=[Optional()])


class ReviewEditForm(JsonForm):
    review_text = TextAreaField('Review', validators=[DataRequired()])


class RatingForm(JsonForm):
    product_id = IntegerField('Product', validators=[DataRequired()])
    customer_id = IntegerField('Customer', validators=[DataRequired()])
    rating = IntegerField('Rating', validators=[whole_number, NumberRange(min=1, max=5)])


class FeedbackForm(JsonForm):
    """Review text plus rating for one product, as taken by add_review."""
    customer_id = IntegerField('Customer', validators=[DataRequired()])
    review_text = TextAreaField('Review', validators=[DataRequired()])
    rating = IntegerField('Rating', validators=[whole_number, NumberRange(min=1, max=5)])


class ReviseFeedbackForm(JsonForm):
    rating_id = IntegerField('Rating', validators=[DataRequired()])
    rating = IntegerField('Score', validators=[whole_number, NumberRange(min=1, max=5)])
    review_id = IntegerField('Review', validators=[DataRequired()])
    review_text = TextAreaField('Review', validators=[DataRequired()])
