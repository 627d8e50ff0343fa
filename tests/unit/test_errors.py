"""Tests for ac_common.errors and ac_common.response."""

from src.ac_common.errors import (
    AppError,
    AuctionEndedError,
    AuctionNotActiveError,
    BidTooLowError,
    InsufficientStockError,
    InvalidCallbackPayloadError,
    InvalidWebhookSignatureError,
    NotAnAuctionError,
    PaymentGatewayUnavailableError,
    PaymentNotConfiguredError,
    PaymentRejectedError,
    ProductNotFoundError,
    UserNotFoundError,
)
from src.ac_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1, message="x"), Exception)


class TestSpecificErrors:
    def test_not_found_kinds_are_404(self) -> None:
        assert ProductNotFoundError("p1").http_status == 404
        assert UserNotFoundError("u1").http_status == 404

    def test_not_an_auction_is_400(self) -> None:
        err = NotAnAuctionError("p1")
        assert err.code == 3001
        assert err.http_status == 400

    def test_auction_state_conflicts_are_409(self) -> None:
        assert AuctionNotActiveError("p1").http_status == 409
        assert AuctionEndedError("p1").http_status == 409

    def test_bid_too_low_carries_threshold(self) -> None:
        err = BidTooLowError(amount_cents=10000, threshold_cents=15000)
        assert err.code == 3004
        assert err.http_status == 409
        assert err.threshold_cents == 15000
        assert "15000" in err.message

    def test_insufficient_stock_message(self) -> None:
        err = InsufficientStockError("p1", requested=5, available=2)
        assert err.http_status == 409
        assert "5" in err.message and "2" in err.message

    def test_payment_errors_are_distinguishable(self) -> None:
        kinds = {
            PaymentNotConfiguredError().http_status,
            PaymentRejectedError("bad").http_status,
            PaymentGatewayUnavailableError("timeout").http_status,
        }
        assert kinds == {503, 502, 504}

    def test_webhook_errors(self) -> None:
        assert InvalidWebhookSignatureError().http_status == 403
        assert InvalidCallbackPayloadError("x").http_status == 400


class TestApiResponse:
    def test_success_response(self) -> None:
        resp = success_response({"id": "b1"})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"id": "b1"}
        assert resp.warning is None

    def test_success_with_warning(self) -> None:
        resp = success_response({"id": "o1"}, warning="Payment session not created")
        assert resp.warning == "Payment session not created"

    def test_error_response(self) -> None:
        resp = error_response(3004, "Bid too low")
        assert resp.code == 3004
        assert resp.data is None

    def test_request_id_format(self) -> None:
        assert ApiResponse().request_id.startswith("req_")
