"""
Reports API - FastAPI router for menu pricing and sales report tables.
"""
from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from ..reports.menu_report import build_menu_pricing_rows
from ..reports.sales_report import summarize_sales

router = APIRouter(prefix="/reports", tags=["reports"])


class MenuReportRequest(BaseModel):
    """Menu items as stored, pricingMetadata included."""
    items: list[dict[str, Any]] = []


class SalesReportRequest(BaseModel):
    """Stored transactions plus an optional ISO date range."""
    transactions: list[dict[str, Any]] = []
    startDate: Optional[str] = None
    endDate: Optional[str] = None


@router.post("/menu")
async def menu_report(req: MenuReportRequest):
    """Base and final prices of every item, size and order type."""
    return build_menu_pricing_rows(req.items)


@router.post("/sales")
async def sales_report(req: SalesReportRequest):
    """Revenue totals with item-wise and daily breakdowns."""
    report = summarize_sales(req.transactions, req.startDate, req.endDate)
    return report.to_dict()
