"""Staff-only catalog, customer and analytics routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from storefront.api.deps import StaffAccount
from storefront.schemas.account import AccountResponse, CustomerListResponse
from storefront.schemas.analytics import MonthlySalesSchema, SalesAnalyticsResponse
from storefront.schemas.product import ProductListResponse, ProductResponse
from storefront.services.account_service import AccountService, get_account_service
from storefront.services.analytics_service import AnalyticsService, get_analytics_service
from storefront.services.product_service import ProductService, get_product_service

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/products", response_model=ProductListResponse)
async def list_all_products(
    actor: StaffAccount,
    category: Annotated[str | None, Query(description="Filter by category")] = None,
    product_service: ProductService = Depends(get_product_service),
) -> ProductListResponse:
    """List every product, including deactivated ones."""
    products = await product_service.list_products(category=category, include_inactive=True)
    return ProductListResponse(products=[ProductResponse(**p) for p in products])


@router.get("/customers", response_model=CustomerListResponse)
async def list_customers(
    actor: StaffAccount,
    account_service: AccountService = Depends(get_account_service),
) -> CustomerListResponse:
    customers = await account_service.list_customers(actor)
    return CustomerListResponse(customers=[AccountResponse(**c) for c in customers])


@router.get("/analytics/sales", response_model=SalesAnalyticsResponse)
async def sales_analytics(
    actor: StaffAccount,
    months: Annotated[int, Query(ge=1, le=24, description="Number of months to cover")] = 12,
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> SalesAnalyticsResponse:
    """Monthly approved/discarded totals, oldest month first."""
    summary = await analytics_service.monthly_sales(actor, months=months)
    return SalesAnalyticsResponse(
        data=[MonthlySalesSchema.model_validate(month) for month in summary],
    )
