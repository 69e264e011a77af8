from datetime import date
from decimal import Decimal

from ..extensions import db


class BaseModel(db.Model):
    __abstract__ = True
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    def to_dict(self):
        """
        Column values as JSON-friendly types:
        - Decimal -> float
        - date -> ISO string
        """
        data = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key)
            if isinstance(value, Decimal):
                value = float(value)
            elif isinstance(value, date):
                value = value.isoformat()
            data[column.key] = value
        return data
