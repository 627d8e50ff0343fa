"""ac_payment REST endpoints.

POST /payments/callback   gateway webhook (unauthenticated, signature-checked)

The gateway only looks at the status code, so every outcome is answered
with the ApiResponse envelope, including unexpected failures.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.ac_common.database import get_db_session
from src.ac_common.errors import AppError, InternalError
from src.ac_common.response import error_response, success_response
from src.ac_gateway.middleware.request_log import get_request_id
from src.ac_payment.application.reconciliation import PaymentReconciliationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])

_service = PaymentReconciliationService()


def get_reconciliation_service() -> PaymentReconciliationService:
    return _service


@router.post("/callback")
async def payment_callback(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[PaymentReconciliationService, Depends(get_reconciliation_service)],
    x_signature: Annotated[str | None, Header()] = None,
) -> JSONResponse:
    raw_body = await request.body()
    request_id = get_request_id(request)
    try:
        result = await service.handle_callback(db, raw_body, x_signature)
    except AppError as exc:
        logger.warning(
            "Payment callback rejected (%s): [%d] %s", request_id, exc.code, exc.message
        )
        resp = error_response(exc.code, exc.message)
        resp.request_id = request_id
        return JSONResponse(status_code=exc.http_status, content=resp.model_dump())
    except Exception:
        logger.exception(
            "Payment callback failed (%s), body=%r", request_id, raw_body[:512]
        )
        err = InternalError("Failed to process payment callback")
        resp = error_response(err.code, err.message)
        resp.request_id = request_id
        return JSONResponse(status_code=err.http_status, content=resp.model_dump())

    resp = success_response(
        {
            "order_id": result.order_id,
            "status": result.status,
            "previous_status": result.previous_status,
            "updated": result.updated,
        },
        message="Payment status updated" if result.updated else "Payment status unchanged",
    )
    resp.request_id = request_id
    return JSONResponse(status_code=200, content=resp.model_dump())
