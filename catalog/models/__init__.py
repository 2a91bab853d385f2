from .record import ProductRecord
from .category import Category
from .product import Product
