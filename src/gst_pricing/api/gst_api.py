"""
GST API - FastAPI router exposing breakdowns, pricing matrices and cart totals.
"""
import logging
from typing import Any, Optional, Union

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..config.settings import get_settings
from ..engine import CartAggregator, PricingMatrixBuilder, compute, require_order_type
from ..errors import UnknownOrderTypeError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/gst", tags=["gst"])

matrix_builder = PricingMatrixBuilder()
cart_aggregator = CartAggregator()

Number = Optional[Union[float, str]]


# Pydantic models for API
class BreakdownRequest(BaseModel):
    """Request model for a single breakdown."""
    amount: Number = None
    cgstPercent: Number = 0
    sgstPercent: Number = 0
    priceIncludesTax: bool = True


class PriceDefinition(BaseModel):
    """Prices as entered on the item form."""
    default: Number = None
    sizes: dict[str, Number] = {}


class MatrixRequest(BaseModel):
    """Request model for building a matrix from explicit prices."""
    priceDefinition: PriceDefinition
    gstConfig: Optional[dict[str, dict[str, Number]]] = None
    priceIncludesTax: Optional[bool] = None


class ItemMatrixRequest(BaseModel):
    """Request model for building a matrix from a stored menu item."""
    item: dict[str, Any]
    orderTypes: Optional[list[str]] = None


class CartSummaryRequest(BaseModel):
    """Request model for cart aggregation."""
    items: list[dict[str, Any]] = []
    orderType: Optional[str] = "Dining"
    strict: bool = False


# Endpoints

@router.post("/breakdown")
async def breakdown(req: BreakdownRequest):
    """Compute the tax breakdown of one amount."""
    result = compute(req.amount, req.cgstPercent, req.sgstPercent, req.priceIncludesTax)
    return result.to_dict()


@router.post("/matrix")
async def build_matrix(req: MatrixRequest):
    """Build a pricing matrix; GST config and pricing mode default to the branch settings."""
    settings = get_settings()
    gst_config = req.gstConfig if req.gstConfig is not None else settings.gst_config()
    includes_tax = req.priceIncludesTax if req.priceIncludesTax is not None else settings.price_includes_tax
    try:
        matrix = matrix_builder.from_definition(req.priceDefinition.model_dump(), gst_config, includes_tax)
    except Exception as e:
        logger.exception("Matrix build failed")
        raise HTTPException(status_code=500, detail=str(e))
    return matrix.to_dict()


@router.post("/matrix/item")
async def build_item_matrix(req: ItemMatrixRequest):
    """Build a pricing matrix from a stored menu item record."""
    try:
        if req.orderTypes:
            matrix = matrix_builder.from_item(req.item, req.orderTypes)
        else:
            matrix = matrix_builder.from_item(req.item)
    except Exception as e:
        logger.exception("Item matrix build failed")
        raise HTTPException(status_code=500, detail=str(e))
    return matrix.to_dict()


@router.post("/cart-summary")
async def cart_summary(req: CartSummaryRequest):
    """Aggregate cart lines into invoice totals."""
    if req.strict:
        try:
            require_order_type(req.orderType)
        except UnknownOrderTypeError as e:
            raise HTTPException(status_code=422, detail=str(e))
    try:
        summary = cart_aggregator.summarize(req.items, req.orderType)
    except Exception as e:
        logger.exception("Cart summary failed")
        raise HTTPException(status_code=500, detail=str(e))
    return summary.to_dict()


@router.get("/settings")
async def gst_settings():
    """Current GST settings as config store records."""
    return get_settings().to_config_payload()
