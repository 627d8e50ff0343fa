"""ac_order REST endpoints.

POST /orders              fixed-price checkout (201)
GET  /orders/{order_id}   own order with its items
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ac_common.database import get_db_session
from src.ac_common.response import ApiResponse, success_response
from src.ac_gateway.auth.dependencies import get_current_user
from src.ac_gateway.middleware.request_log import get_request_id
from src.ac_gateway.user.db_models import UserModel
from src.ac_order.application.schemas import CreateOrderRequest, OrderResponse
from src.ac_order.application.service import CartLine, OrderApplicationService

router = APIRouter(prefix="/orders", tags=["orders"])

_service = OrderApplicationService()


def get_order_service() -> OrderApplicationService:
    return _service


@router.post("", status_code=201)
async def create_order(
    req: CreateOrderRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[OrderApplicationService, Depends(get_order_service)],
) -> ApiResponse:
    result = await service.create_order(
        db,
        current_user,
        [CartLine(product_id=i.product_id, quantity=i.quantity) for i in req.items],
        shipping_address=req.shipping_address,
        notes=req.notes,
    )
    resp = success_response(
        OrderResponse.from_domain(result.order).model_dump(mode="json"),
        message="Order created",
        warning=result.warning,
    )
    resp.request_id = get_request_id(request)
    return resp


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[OrderApplicationService, Depends(get_order_service)],
) -> ApiResponse:
    order = await service.get_order(db, order_id, str(current_user.id))
    resp = success_response(OrderResponse.from_domain(order).model_dump(mode="json"))
    resp.request_id = get_request_id(request)
    return resp
