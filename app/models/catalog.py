"""Product Catalog Models"""

from sqlalchemy import Column, String, Numeric, Boolean

from app.models.base import BaseModel, OwnedMixin, StatusMixin


class ProductCategory(BaseModel, OwnedMixin, StatusMixin):
    """Menu section (Veg, Beverage, ...). Products reference it by name."""
    __tablename__ = "product_categories"

    name = Column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<ProductCategory {self.name}>"


class Product(BaseModel, OwnedMixin, StatusMixin):
    """Sellable menu item."""
    __tablename__ = "products"

    name = Column(String(200), nullable=False)
    price = Column(Numeric(18, 2), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    is_favorite = Column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<Product {self.name} {self.price}>"
