"""Catalog Service - products and product categories"""

from typing import List

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.catalog import Product, ProductCategory
from app.schemas.product import ProductCreate, ProductUpdate, ProductCategoryCreate


class CatalogService:
    @staticmethod
    async def list_products(db: AsyncSession, owner_id: int) -> List[Product]:
        result = await db.execute(
            select(Product)
            .where(Product.user_id == owner_id, Product.is_active.is_(True))
            .order_by(Product.name)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_product(
        db: AsyncSession,
        owner_id: int,
        product_id: int,
        include_inactive: bool = False,
    ) -> Product:
        query = select(Product).where(Product.id == product_id, Product.user_id == owner_id)
        if not include_inactive:
            query = query.where(Product.is_active.is_(True))
        product = (await db.execute(query)).scalar_one_or_none()
        if product is None:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    async def create_product(db: AsyncSession, owner_id: int, data: ProductCreate) -> Product:
        product = Product(
            user_id=owner_id,
            name=data.name,
            price=data.price,
            category=data.category,
            is_favorite=data.is_favorite,
            is_active=True,
        )
        db.add(product)
        await db.commit()
        await db.refresh(product)
        return product

    @staticmethod
    async def update_product(
        db: AsyncSession,
        owner_id: int,
        product_id: int,
        data: ProductUpdate,
    ) -> Product:
        product = await CatalogService.get_product(db, owner_id, product_id, include_inactive=True)
        product.name = data.name
        product.price = data.price
        product.category = data.category
        product.is_favorite = data.is_favorite
        await db.commit()
        await db.refresh(product)
        return product

    @staticmethod
    async def delete_product(db: AsyncSession, owner_id: int, product_id: int) -> None:
        product = await CatalogService.get_product(db, owner_id, product_id, include_inactive=True)
        product.soft_delete()
        await db.commit()

    @staticmethod
    async def list_categories(db: AsyncSession, owner_id: int) -> List[ProductCategory]:
        result = await db.execute(
            select(ProductCategory)
            .where(ProductCategory.user_id == owner_id, ProductCategory.is_active.is_(True))
            .order_by(ProductCategory.name)
        )
        return list(result.scalars().all())

    @staticmethod
    async def _get_category(db: AsyncSession, owner_id: int, category_id: int) -> ProductCategory:
        result = await db.execute(
            select(ProductCategory).where(
                ProductCategory.id == category_id,
                ProductCategory.user_id == owner_id,
            )
        )
        category = result.scalar_one_or_none()
        if category is None:
            raise NotFoundError("Category not found")
        return category

    @staticmethod
    async def create_category(
        db: AsyncSession,
        owner_id: int,
        data: ProductCategoryCreate,
    ) -> ProductCategory:
        category = ProductCategory(user_id=owner_id, name=data.name, is_active=True)
        db.add(category)
        await db.commit()
        await db.refresh(category)
        return category

    @staticmethod
    async def rename_category(
        db: AsyncSession,
        owner_id: int,
        category_id: int,
        data: ProductCategoryCreate,
    ) -> ProductCategory:
        """Rename a category and carry the owner's products along with it."""
        category = await CatalogService._get_category(db, owner_id, category_id)
        old_name = category.name
        if old_name != data.name:
            category.name = data.name
            await db.execute(
                update(Product)
                .where(Product.user_id == owner_id, Product.category == old_name)
                .values(category=data.name)
            )
            await db.commit()
            await db.refresh(category)
        return category

    @staticmethod
    async def delete_category(db: AsyncSession, owner_id: int, category_id: int) -> None:
        category = await CatalogService._get_category(db, owner_id, category_id)
        category.soft_delete()
        await db.commit()
