"""API V1 Router"""

from fastapi import APIRouter

# Import endpoint routers
from app.api.v1.endpoints import (
    auth, products, product_categories, bills,
    dashboard, expenses, report_settings
)

# Create API v1 router
api_router = APIRouter()

# Include endpoint routers with prefixes and tags
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(products.router, prefix="/products", tags=["Products"])
api_router.include_router(product_categories.router, prefix="/product-categories", tags=["Product Categories"])
api_router.include_router(bills.router, prefix="/bills", tags=["Bills"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(expenses.router, prefix="/expenses", tags=["Expenses"])
api_router.include_router(report_settings.router, prefix="/report-settings", tags=["Report Settings"])
