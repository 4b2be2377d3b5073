# app/api/routers/admin/analytics.py
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.data.database import get_db
from app.data.models.user import UserModel
from app.domain.schemas import CustomerInsightsOut, SalesByDateRow, SalesOverviewOut, TopProductRow
from app.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/api/admin/analytics", tags=["admin-analytics"])


@router.get("/sales-overview", response_model=SalesOverviewOut)
def sales_overview(
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return AnalyticsService(db).sales_overview()


@router.get("/sales-by-date", response_model=List[SalesByDateRow])
def sales_by_date(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return AnalyticsService(db).sales_by_date(start_date, end_date)


@router.get("/top-products", response_model=List[TopProductRow])
def top_products(
    limit: int = Query(10, ge=1, le=100),
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return AnalyticsService(db).top_products(limit)


@router.get("/customer-insights", response_model=CustomerInsightsOut)
def customer_insights(
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return AnalyticsService(db).customer_insights()
