"""Unit tests for payment, plan and user domain rules"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from pydantic import ValidationError

from src.domain.payment import Payment, PaymentReferenceType, PaymentStatus
from src.domain.subscription_plan import SubscriptionPlan
from src.domain.user import UserRole, validate_profile


@pytest.fixture
def pending_payment():
    return Payment(
        id=1,
        amount=Decimal("150.00"),
        reference_type=PaymentReferenceType.RESERVATION,
        reference_id="10",
        idempotency_key="key-1",
    )


@pytest.fixture
def plan():
    return SubscriptionPlan(
        id=1,
        name="Fleet Pro",
        monthly_price=Decimal("49.00"),
        yearly_price=Decimal("490.00"),
    )


class TestPaymentTransitions:

    def test_mark_completed_only_once(self, pending_payment):
        assert pending_payment.mark_completed("pi_123") is True
        assert pending_payment.status == PaymentStatus.COMPLETED
        assert pending_payment.transaction_ref == "pi_123"
        assert pending_payment.paid_at is not None

        assert pending_payment.mark_completed("pi_123") is False
        assert pending_payment.mark_failed("late failure") is False
        assert pending_payment.status == PaymentStatus.COMPLETED

    def test_mark_failed_records_reason(self, pending_payment):
        assert pending_payment.mark_failed("card_declined") is True
        assert pending_payment.status == PaymentStatus.FAILED
        assert pending_payment.failure_reason == "card_declined"


class TestPlanPricing:
    """Periods of at most 32 days use the monthly price"""

    def test_32_days_is_monthly(self, plan):
        start = datetime(2025, 1, 1)
        assert plan.price_for_period(start, start + timedelta(days=32)) == Decimal("49.00")

    def test_33_days_is_yearly(self, plan):
        start = datetime(2025, 1, 1)
        assert plan.price_for_period(start, start + timedelta(days=33)) == Decimal("490.00")

    def test_just_over_32_days_is_yearly(self, plan):
        start = datetime(2025, 1, 1)
        assert plan.price_for_period(start, start + timedelta(days=32, seconds=1)) == Decimal("490.00")


class TestProfileValidation:

    def test_agency_profile(self):
        profile = validate_profile(UserRole.AGENCY, {"name": "City Cars", "address": "12 Harbour Road"})

        assert profile == {
            "name": "City Cars",
            "address": "12 Harbour Road",
            "logo": None,
            "is_verified": False,
        }

    def test_customer_profile_requires_names(self):
        with pytest.raises(ValidationError):
            validate_profile(UserRole.CUSTOMER, {"first_name": "Jane"})

    def test_unknown_attributes_rejected(self):
        with pytest.raises(ValidationError):
            validate_profile(UserRole.ADMIN, {"permissions": [], "is_verified": True})
