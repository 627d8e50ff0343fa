"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Product
  3xxx: Auction/Bid
  4xxx: Order
  5xxx: Payment
  9xxx: System

HTTP status follows the failure kind:
  NotFound 404, InvalidOperation/BadInput 400, Conflict 409, Forbidden 403,
  gateway rejected 502, gateway not configured 503, transient 504, internal 500.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/User ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired credentials", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403)


class UserNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(1006, f"User not found: {user_id}", 404)


# --- 2xxx: Product ---

class ProductNotFoundError(AppError):
    def __init__(self, product_id: str) -> None:
        super().__init__(2001, f"Product not found: {product_id}", 404)


class ProductNotAvailableError(AppError):
    def __init__(self, product_id: str) -> None:
        super().__init__(2002, f"Product is not available: {product_id}", 409)


class InsufficientStockError(AppError):
    def __init__(self, product_id: str, requested: int, available: int) -> None:
        super().__init__(
            2003,
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}",
            409,
        )


# --- 3xxx: Auction/Bid ---

class NotAnAuctionError(AppError):
    def __init__(self, product_id: str) -> None:
        super().__init__(
            3001, f"Bids can only be placed on auction products: {product_id}", 400
        )


class AuctionNotActiveError(AppError):
    def __init__(self, product_id: str) -> None:
        super().__init__(3002, f"Auction is not active: {product_id}", 409)


class AuctionEndedError(AppError):
    def __init__(self, product_id: str) -> None:
        super().__init__(3003, f"Auction has ended: {product_id}", 409)


class BidTooLowError(AppError):
    def __init__(self, amount_cents: int, threshold_cents: int) -> None:
        self.threshold_cents = threshold_cents
        super().__init__(
            3004,
            f"Bid must be higher than current highest bid ({threshold_cents} cents), "
            f"got {amount_cents} cents",
            409,
        )


class BidNotFoundError(AppError):
    def __init__(self, bid_id: str) -> None:
        super().__init__(3005, f"Bid not found: {bid_id}", 404)


class BidNotOwnedError(AppError):
    def __init__(self, bid_id: str) -> None:
        super().__init__(3006, f"Bid {bid_id} does not belong to the caller", 403)


# --- 4xxx: Order ---

class InvalidOrderItemsError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(4001, f"Invalid order items: {detail}", 400)


class OrderNotFoundError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(4004, f"Order not found: {order_id}", 404)


class OrderNotOwnedError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(4005, f"Order {order_id} does not belong to the caller", 403)


# --- 5xxx: Payment ---

class PaymentNotConfiguredError(AppError):
    def __init__(self) -> None:
        super().__init__(
            5001, "Payment service is not configured - PAYMENT_API_KEY is missing", 503
        )


class PaymentRejectedError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(5002, f"Payment gateway rejected the request: {detail}", 502)


class PaymentGatewayUnavailableError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(5003, f"Payment gateway unavailable: {detail}", 504)


class InvalidWebhookSignatureError(AppError):
    def __init__(self) -> None:
        super().__init__(5004, "Webhook signature verification failed", 403)


class InvalidCallbackPayloadError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(5005, f"Invalid callback data: {detail}", 400)


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
