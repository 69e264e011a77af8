from .product import Product
from .customer import Customer
from .rating import Rating
from .review import Review
from .triggers import register_rating_triggers

register_rating_triggers()
