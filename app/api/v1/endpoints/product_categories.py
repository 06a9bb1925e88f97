from typing import Any, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models.user import User
from app.services.catalog_service import CatalogService
from app.schemas.product import ProductCategoryCreate, ProductCategoryResponse
from app.schemas.responses import SuccessResponse

router = APIRouter()


@router.get("", response_model=SuccessResponse[List[ProductCategoryResponse]])
async def list_categories(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    categories = await CatalogService.list_categories(db, current_user.id)
    return SuccessResponse(data=[ProductCategoryResponse.model_validate(c) for c in categories])


@router.post("", response_model=SuccessResponse[ProductCategoryResponse], status_code=status.HTTP_201_CREATED)
async def create_category(
    category_in: ProductCategoryCreate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    category = await CatalogService.create_category(db, current_user.id, category_in)
    return SuccessResponse(data=ProductCategoryResponse.model_validate(category), message="Category created")


@router.put("/{category_id}", response_model=SuccessResponse[ProductCategoryResponse])
async def rename_category(
    category_id: int,
    category_in: ProductCategoryCreate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Rename a category. Products filed under the old name move with it.
    """
    category = await CatalogService.rename_category(db, current_user.id, category_id, category_in)
    return SuccessResponse(data=ProductCategoryResponse.model_validate(category), message="Category updated")


@router.delete("/{category_id}", response_model=SuccessResponse)
async def delete_category(
    category_id: int,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    await CatalogService.delete_category(db, current_user.id, category_id)
    return SuccessResponse(message="Category deleted")
