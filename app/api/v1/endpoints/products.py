from typing import Any, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models.user import User
from app.services.catalog_service import CatalogService
from app.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from app.schemas.responses import SuccessResponse

router = APIRouter()


@router.get("", response_model=SuccessResponse[List[ProductResponse]])
async def list_products(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """Active products of the signed-in owner, by name."""
    products = await CatalogService.list_products(db, current_user.id)
    return SuccessResponse(data=[ProductResponse.model_validate(p) for p in products])


@router.get("/{product_id}", response_model=SuccessResponse[ProductResponse])
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    product = await CatalogService.get_product(db, current_user.id, product_id)
    return SuccessResponse(data=ProductResponse.model_validate(product))


@router.post("", response_model=SuccessResponse[ProductResponse], status_code=status.HTTP_201_CREATED)
async def create_product(
    product_in: ProductCreate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    product = await CatalogService.create_product(db, current_user.id, product_in)
    return SuccessResponse(data=ProductResponse.model_validate(product), message="Product created")


@router.put("/{product_id}", response_model=SuccessResponse[ProductResponse])
async def update_product(
    product_id: int,
    product_in: ProductUpdate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    product = await CatalogService.update_product(db, current_user.id, product_id, product_in)
    return SuccessResponse(data=ProductResponse.model_validate(product), message="Product updated")


@router.delete("/{product_id}", response_model=SuccessResponse)
async def delete_product(
    product_id: int,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """Soft delete; bills keep their snapshot of the product."""
    await CatalogService.delete_product(db, current_user.id, product_id)
    return SuccessResponse(message="Product deleted")
