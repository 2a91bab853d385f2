from datetime import datetime
from catalog import db
from catalog.utils.helpers import fold_turkish


class Category(db.Model):
    __tablename__ = "categories"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, unique=True, index=True)
    description = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, default=True)
    created_date = db.Column(db.DateTime, default=datetime.now)
    updated_date = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    products = db.relationship('Product', backref='category_ref', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description or '',
            'is_active': bool(self.is_active),
            'product_count': self.products.count(),
            'created_date': self.created_date.isoformat() if self.created_date else None,
            'updated_date': self.updated_date.isoformat() if self.updated_date else None,
        }

    @classmethod
    def get_all(cls, active_only=False):
        query = cls.query
        if active_only:
            query = query.filter_by(is_active=True)
        return query.order_by(cls.name.asc()).all()

    @classmethod
    def get_by_name(cls, name):
        """Turkish-insensitive match, folded in Python since SQLite lower() only handles ASCII."""
        if not name or not name.strip():
            return None
        key = fold_turkish(name.strip())
        for category in cls.query.order_by(cls.id.asc()).all():
            if fold_turkish(category.name.strip()) == key:
                return category
        return None
