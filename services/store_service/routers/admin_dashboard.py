"""Admin dashboard router: headline stats, sales series, recent orders, top products."""

from fastapi import APIRouter, Depends, Query
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.models import Locale, SalesPeriod
from services.store_service.routers._helpers import get_locale
from services.store_service.schemas import DashboardResponse, OrderResponse
from services.store_service.services import reporting
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["admin-store"])


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    period: SalesPeriod = Query(SalesPeriod.DAILY),
    locale: Locale = Depends(get_locale),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Store overview for the admin home page."""
    stats = await reporting.get_dashboard_stats(db)
    sales_data = await reporting.get_sales_data(db, period)
    recent_orders = await reporting.get_recent_orders(db)
    top_products = await reporting.get_top_products(db, locale)

    return DashboardResponse(
        stats=stats,
        sales_data=sales_data,
        recent_orders=[OrderResponse.model_validate(o) for o in recent_orders],
        top_products=top_products,
        period=period,
    )
