"""PaymentGatewayClient: MyFatoorah invoice API over httpx.

POST {base_url}/v2/InitiatePayment with a Bearer API key. Failures surface as
three distinguishable errors and are never retried here:

  PaymentNotConfiguredError        no API key configured
  PaymentRejectedError             gateway answered 4xx or IsSuccess=false
  PaymentGatewayUnavailableError   timeout, connection failure or 5xx

Callers decide whether a failure is fatal; order checkout and auction
resolution both treat it as a warning.
"""

import logging
from typing import Any

import httpx

from config.settings import settings
from src.ac_common.cents import cents_to_decimal
from src.ac_common.errors import (
    PaymentGatewayUnavailableError,
    PaymentNotConfiguredError,
    PaymentRejectedError,
)
from src.ac_payment.domain.models import PaymentRequest, PaymentSession

logger = logging.getLogger(__name__)

_INITIATE_PAYMENT_PATH = "/v2/InitiatePayment"


def build_initiate_payload(req: PaymentRequest, currency: str) -> dict[str, Any]:
    """Wire payload; the order id travels in both echo fields."""
    amount = float(cents_to_decimal(req.amount_cents))
    return {
        "InvoiceAmount": amount,
        "CurrencyIso": currency,
        "CustomerName": req.customer_name,
        "CustomerEmail": req.customer_email,
        "CustomerPhone": req.customer_phone,
        "Language": req.language,
        "CustomerReference": req.order_id,
        "CustomerCivilId": "",
        "UserDefinedField": req.order_id,
        "ExpireDate": "",
        "CustomerAddress": {
            "Block": "",
            "Street": "",
            "HouseBuildingNo": "",
            "Address": req.customer_address or "",
        },
        "InvoiceItems": [
            {
                "ItemName": f"Order {req.order_id}",
                "Quantity": 1,
                "UnitPrice": amount,
            }
        ],
    }


def _error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("Message")
        return str(message) if message else None
    return None


class PaymentGatewayClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        currency: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else (settings.PAYMENT_API_KEY or "")
        self._base_url = (base_url or settings.PAYMENT_BASE_URL).rstrip("/")
        self._currency = currency or settings.PAYMENT_CURRENCY
        self._timeout = (
            timeout_seconds if timeout_seconds is not None else settings.PAYMENT_TIMEOUT_SECONDS
        )
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self._api_key) and bool(self._base_url)

    async def create_payment_session(self, req: PaymentRequest) -> PaymentSession:
        if not self._api_key:
            raise PaymentNotConfiguredError()

        url = f"{self._base_url}{_INITIATE_PAYMENT_PATH}"
        payload = build_initiate_payload(req, self._currency)
        logger.info(
            "Creating payment session: order=%s amount=%s %s",
            req.order_id,
            payload["InvoiceAmount"],
            self._currency,
        )

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                )
        except httpx.TimeoutException as exc:
            raise PaymentGatewayUnavailableError(f"timeout after {self._timeout}s") from exc
        except httpx.TransportError as exc:
            raise PaymentGatewayUnavailableError(f"unable to connect: {exc}") from exc

        return self._parse_session_response(response, req.order_id)

    def _parse_session_response(self, response: httpx.Response, order_id: str) -> PaymentSession:
        if response.status_code >= 500:
            raise PaymentGatewayUnavailableError(f"HTTP {response.status_code}")
        if response.status_code == 401:
            raise PaymentRejectedError("invalid API key")
        if response.status_code == 404:
            raise PaymentRejectedError("endpoint not found, check PAYMENT_BASE_URL")
        if response.status_code >= 400:
            detail = _error_message(response) or "Invalid request"
            raise PaymentRejectedError(f"HTTP {response.status_code}: {detail}")

        try:
            body = response.json()
        except ValueError as exc:
            raise PaymentRejectedError("response is not JSON") from exc

        if not isinstance(body, dict) or not body.get("IsSuccess"):
            detail = body.get("Message") if isinstance(body, dict) else None
            logger.error("Payment session rejected for order %s: %s", order_id, body)
            raise PaymentRejectedError(detail or "Payment session creation failed")

        data = body.get("Data") or {}
        try:
            session = PaymentSession(
                invoice_id=str(data["InvoiceId"]),
                payment_id=str(data["PaymentId"]),
                payment_url=str(data["PaymentURL"]),
                is_direct_payment=bool(data.get("IsDirectPayment", False)),
                payment_method=data.get("PaymentMethod"),
            )
        except KeyError as exc:
            raise PaymentRejectedError(f"response missing Data.{exc.args[0]}") from exc

        logger.info(
            "Payment session created: order=%s invoice=%s", order_id, session.invoice_id
        )
        return session
