"""Fees REST API: 4 read-only endpoints, no auth, no database."""
from fastapi import APIRouter, Query, Request

from src.mp_common.response import ApiResponse, success_response
from src.mp_fees.application.service import FeeApplicationService
from src.mp_fees.domain.models import RefundBasis

router = APIRouter(prefix="/fees", tags=["fees"])
_service = FeeApplicationService()


@router.get("/quote")
async def quote_fees(
    request: Request,
    price: str = Query(..., description="Unit price in token units, e.g. '0.25'"),
    quantity: int = Query(1, ge=1),
) -> ApiResponse:
    data = _service.quote(price, quantity)
    return success_response(data.model_dump(mode="json"), _request_id(request))


@router.get("/breakdown")
async def fee_breakdown(
    request: Request,
    price: str = Query(...),
) -> ApiResponse:
    data = _service.breakdown(price)
    return success_response(data.model_dump(mode="json"), _request_id(request))


@router.get("/refund")
async def refund_breakdown(
    request: Request,
    amount: str = Query(..., description="Amount the buyer paid, buyer fee included"),
    basis: RefundBasis = Query(RefundBasis.LEGACY),
) -> ApiResponse:
    data = _service.refund(amount, basis)
    return success_response(data.model_dump(mode="json"), _request_id(request))


@router.get("/config")
async def fee_config(request: Request) -> ApiResponse:
    data = _service.configuration()
    return success_response(data.model_dump(mode="json"), _request_id(request))


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)
