"""Unit tests for RetryingPaymentGateway

Tests cover:
- Transient failures retried with bounded exponential backoff
- Declines never retried
- Exhausted retries re-raise GatewayError
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

from src.adapter.services.retrying_payment_gateway import RetryingPaymentGateway
from src.app.services.payment_gateway import (
    ChargeResult,
    GatewayError,
    PaymentDeclined,
    RefundResult,
)


@pytest.fixture
def inner():
    return MagicMock()


@pytest.fixture
def gateway(inner):
    return RetryingPaymentGateway(inner, max_attempts=3, base_delay=0.5, max_delay=8.0)


def charge(gateway):
    return gateway.charge("cus_1", Decimal("150.00"), "USD", "pm_card_visa", "key-1")


class TestBackoff:

    def test_delay_doubles_and_caps(self, gateway):
        assert gateway.delay_for(0) == 0.5
        assert gateway.delay_for(1) == 1.0
        assert gateway.delay_for(2) == 2.0
        assert gateway.delay_for(10) == 8.0

    def test_rejects_zero_attempts(self, inner):
        with pytest.raises(ValueError):
            RetryingPaymentGateway(inner, max_attempts=0)


@pytest.mark.asyncio
class TestRetries:

    @patch("src.adapter.services.retrying_payment_gateway.asyncio.sleep", new_callable=AsyncMock)
    async def test_recovers_after_transient_failure(self, mock_sleep, gateway, inner):
        """
        Given: The processor fails once then succeeds
        When: charge is called
        Then: The result of the second attempt is returned with the same idempotency key
        """
        inner.charge = AsyncMock(
            side_effect=[
                GatewayError("connection reset"),
                ChargeResult(success=True, transaction_ref="pi_1"),
            ]
        )

        result = await charge(gateway)

        assert result.transaction_ref == "pi_1"
        assert inner.charge.call_count == 2
        for call in inner.charge.call_args_list:
            assert call.args[4] == "key-1"
        mock_sleep.assert_called_once_with(0.5)

    @patch("src.adapter.services.retrying_payment_gateway.asyncio.sleep", new_callable=AsyncMock)
    async def test_decline_is_not_retried(self, mock_sleep, gateway, inner):
        inner.charge = AsyncMock(side_effect=PaymentDeclined("card_declined"))

        with pytest.raises(PaymentDeclined):
            await charge(gateway)

        assert inner.charge.call_count == 1
        mock_sleep.assert_not_called()

    @patch("src.adapter.services.retrying_payment_gateway.asyncio.sleep", new_callable=AsyncMock)
    async def test_exhausted_retries_raise_gateway_error(self, mock_sleep, gateway, inner):
        inner.charge = AsyncMock(side_effect=GatewayError("service unavailable"))

        with pytest.raises(GatewayError) as exc_info:
            await charge(gateway)

        assert exc_info.value.message == "service unavailable"
        assert inner.charge.call_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [0.5, 1.0]

    @patch("src.adapter.services.retrying_payment_gateway.asyncio.sleep", new_callable=AsyncMock)
    async def test_refund_is_retried(self, mock_sleep, gateway, inner):
        inner.refund = AsyncMock(
            side_effect=[GatewayError("timeout"), RefundResult(success=True, refund_ref="re_1")]
        )

        result = await gateway.refund("pi_1")

        assert result.refund_ref == "re_1"
        inner.refund.assert_called_with("pi_1", None)

    def test_webhook_parsing_is_delegated(self, gateway, inner):
        inner.construct_webhook_event = MagicMock(return_value="event")

        assert gateway.construct_webhook_event(b"{}", "sig") == "event"
        inner.construct_webhook_event.assert_called_once_with(b"{}", "sig")
