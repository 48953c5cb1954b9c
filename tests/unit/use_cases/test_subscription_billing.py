"""Unit tests for subscription use cases

Tests cover:
- Plan price chosen by period length (32 days monthly, 33 yearly)
- Check order: plan, agency, interval, active subscription
- Failed charge removes the new subscription
- Renewal extends, charges for the extension and rejects shorter dates
- Paid subscriptions stay pending until the charge settles
- Updates cannot produce a second current subscription
"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.services.payment_gateway import ChargeResult, ChargeStatus, PaymentDeclined, RefundResult
from src.app.use_cases.subscriptions import (
    CancelSubscription,
    CreateSubscription,
    CreateSubscriptionCommandDTO,
    RenewSubscription,
    RenewSubscriptionCommandDTO,
    UpdateSubscription,
    UpdateSubscriptionCommandDTO,
)
from src.domain.payment import PaymentStatus
from src.domain.subscription import Subscription, SubscriptionStatus
from src.domain.subscription_plan import SubscriptionPlan
from src.domain.user import User, UserRole


START = datetime(2025, 7, 1)
NOW = datetime(2025, 6, 30)


@pytest.fixture
def plan():
    return SubscriptionPlan(
        id=1,
        name="Fleet Pro",
        monthly_price=Decimal("49.00"),
        yearly_price=Decimal("490.00"),
    )


@pytest.fixture
def agency():
    return User(
        id=7,
        email="fleet@citycars.example",
        role=UserRole.AGENCY,
        name="City Cars",
        profile={"name": "City Cars", "address": "12 Harbour Road"},
        payment_customer_ref="cus_7",
    )


@pytest.fixture
def user_repo(agency):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=agency)
    return repo


@pytest.fixture
def plan_repo(plan):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=plan)
    return repo


@pytest.fixture
def subscription_repo():
    repo = MagicMock()
    repo.get_current_for_agency = AsyncMock(return_value=None)
    created = []

    async def create(subscription):
        subscription.id = 8
        created.append(subscription)
        return subscription

    repo.create = AsyncMock(side_effect=create)
    repo.get_by_id = AsyncMock(side_effect=lambda *_, **__: created[-1] if created else None)
    repo.update = AsyncMock(side_effect=lambda s: s)
    repo.delete = AsyncMock()
    return repo


@pytest.fixture
def payment_repo():
    repo = MagicMock()
    created = []

    async def create(payment):
        payment.id = 91
        created.append(payment)
        return payment

    repo.create = AsyncMock(side_effect=create)
    repo.get_by_id = AsyncMock(side_effect=lambda *_, **__: created[-1] if created else None)
    repo.update = AsyncMock(side_effect=lambda p: p)
    return repo


@pytest.fixture
def mock_gateway():
    gateway = MagicMock()
    gateway.charge = AsyncMock(return_value=ChargeResult(success=True, transaction_ref="pi_sub"))
    return gateway


@pytest.fixture
def create_use_case(mock_uow, user_repo, plan_repo, subscription_repo, payment_repo, mock_gateway):
    return CreateSubscription(
        uow=mock_uow,
        user_repo=user_repo,
        plan_repo=plan_repo,
        subscription_repo=subscription_repo,
        payment_repo=payment_repo,
        payment_gateway=mock_gateway,
    )


@pytest.fixture
def renew_use_case(mock_uow, user_repo, plan_repo, subscription_repo, payment_repo, mock_gateway):
    return RenewSubscription(
        uow=mock_uow,
        user_repo=user_repo,
        plan_repo=plan_repo,
        subscription_repo=subscription_repo,
        payment_repo=payment_repo,
        payment_gateway=mock_gateway,
    )


def create_command(days, payment_method_id="pm_card_visa", **overrides):
    data = dict(
        agency_id=7,
        plan_id=1,
        start_date=START,
        end_date=START + timedelta(days=days),
        payment_method_id=payment_method_id,
    )
    data.update(overrides)
    return CreateSubscriptionCommandDTO(**data)


@pytest.mark.asyncio
class TestCreateSubscription:

    async def test_32_day_period_charges_monthly_price(self, create_use_case, mock_gateway):
        result = await create_use_case.execute(create_command(32), now=NOW)

        assert result.is_ok()
        assert result.value.amount_charged == Decimal("49.00")
        assert result.value.payment_id == 91
        assert mock_gateway.charge.call_args.args[1] == Decimal("49.00")
        assert mock_gateway.charge.call_args.args[0] == "cus_7"

    async def test_33_day_period_charges_yearly_price(self, create_use_case, mock_gateway):
        result = await create_use_case.execute(create_command(33), now=NOW)

        assert result.value.amount_charged == Decimal("490.00")
        assert mock_gateway.charge.call_args.args[1] == Decimal("490.00")

    async def test_without_payment_method_no_charge(self, create_use_case, mock_gateway, payment_repo):
        result = await create_use_case.execute(create_command(30, payment_method_id=None), now=NOW)

        assert result.is_ok()
        assert result.value.status == "active"
        assert result.value.payment_id is None
        mock_gateway.charge.assert_not_called()
        payment_repo.create.assert_not_called()

    async def test_plan_checked_before_agency(self, create_use_case, plan_repo, user_repo):
        plan_repo.get_by_id = AsyncMock(return_value=None)
        user_repo.get_by_id = AsyncMock(return_value=None)

        result = await create_use_case.execute(create_command(30), now=NOW)

        assert result.error.code == "PLAN_NOT_FOUND"

    async def test_customer_is_not_an_agency(self, create_use_case, agency):
        agency.role = UserRole.CUSTOMER

        result = await create_use_case.execute(create_command(30), now=NOW)

        assert result.error.code == "AGENCY_NOT_FOUND"

    async def test_end_before_start(self, create_use_case):
        result = await create_use_case.execute(create_command(0), now=NOW)

        assert result.error.code == "INVALID_INPUT"

    async def test_already_active(self, create_use_case, subscription_repo):
        subscription_repo.get_current_for_agency = AsyncMock(return_value=MagicMock(id=3))

        result = await create_use_case.execute(create_command(30), now=NOW)

        assert result.error.code == "SUBSCRIPTION_ALREADY_ACTIVE"
        subscription_repo.get_current_for_agency.assert_called_once_with(7, NOW)
        subscription_repo.create.assert_not_called()

    async def test_declined_charge_removes_subscription(
        self, create_use_case, mock_gateway, subscription_repo, payment_repo
    ):
        mock_gateway.charge = AsyncMock(side_effect=PaymentDeclined("insufficient_funds"))

        result = await create_use_case.execute(create_command(30), now=NOW)

        assert result.error.code == "PAYMENT_DECLINED"
        subscription_repo.delete.assert_called_once()
        assert payment_repo.create.call_args.args[0].status == PaymentStatus.FAILED


@pytest.mark.asyncio
class TestCreateSubscriptionSettlement:

    async def test_paid_subscription_activates_after_capture(
        self, create_use_case, subscription_repo, mock_uow
    ):
        result = await create_use_case.execute(create_command(30), now=NOW)

        created = subscription_repo.create.call_args.args[0]
        assert result.value.status == "active"
        assert result.value.is_active is True
        assert created.status == SubscriptionStatus.ACTIVE
        subscription_repo.get_by_id.assert_called_once_with(8, for_update=True)

    async def test_processing_charge_leaves_subscription_pending(
        self, create_use_case, mock_gateway, payment_repo
    ):
        """
        Given: The gateway is still processing the first charge
        When: An agency subscribes
        Then: The subscription is pending and inactive, the payment keeps the
              transaction_ref for the webhook
        """
        mock_gateway.charge = AsyncMock(
            return_value=ChargeResult(
                success=False, transaction_ref="pi_sub", status=ChargeStatus.PROCESSING
            )
        )

        result = await create_use_case.execute(create_command(30), now=NOW)

        assert result.is_ok()
        assert result.value.status == "pending"
        assert result.value.is_active is False
        payment = payment_repo.create.call_args.args[0]
        assert payment.status == PaymentStatus.PENDING
        assert payment.transaction_ref == "pi_sub"

    async def test_cancel_during_charge_is_refunded(
        self, create_use_case, mock_gateway, subscription_repo, payment_repo
    ):
        async def charge_then_cancel(*args, **kwargs):
            subscription_repo.create.call_args.args[0].status = SubscriptionStatus.CANCELLED
            return ChargeResult(success=True, transaction_ref="pi_sub")

        mock_gateway.charge = AsyncMock(side_effect=charge_then_cancel)
        mock_gateway.refund = AsyncMock(return_value=RefundResult(success=True, refund_ref="re_sub"))

        result = await create_use_case.execute(create_command(30), now=NOW)

        assert result.value.status == "cancelled"
        assert result.value.is_active is False
        mock_gateway.refund.assert_called_once_with("pi_sub")
        assert payment_repo.create.call_args.args[0].status == PaymentStatus.REFUNDED

    async def test_interrupted_charge_frees_the_agency_slot(
        self, create_use_case, mock_gateway, subscription_repo, payment_repo
    ):
        mock_gateway.charge = AsyncMock(side_effect=RuntimeError("connection reset by peer"))

        result = await create_use_case.execute(create_command(30), now=NOW)

        assert result.error.code == "CREATE_SUBSCRIPTION_FAILED"
        subscription_repo.delete.assert_called_once()
        assert payment_repo.create.call_args.args[0].status == PaymentStatus.FAILED

@pytest.mark.asyncio
class TestRenewSubscription:

    @pytest.fixture
    def subscription(self, subscription_repo):
        subscription = Subscription(
            id=8,
            agency_id=7,
            plan_id=1,
            start_date=START,
            end_date=START + timedelta(days=30),
            is_active=False,
            status=SubscriptionStatus.CANCELLED,
        )
        subscription_repo.get_by_id = AsyncMock(return_value=subscription)
        return subscription

    async def test_renewal_extends_and_reactivates(self, renew_use_case, subscription, mock_gateway):
        new_end = subscription.end_date + timedelta(days=365)

        result = await renew_use_case.execute(
            8, RenewSubscriptionCommandDTO(new_end_date=new_end, payment_method_id="pm_1"), now=NOW
        )

        assert result.is_ok()
        assert result.value.end_date == new_end
        assert result.value.status == "active"
        assert result.value.is_active is True
        assert mock_gateway.charge.call_args.args[1] == Decimal("490.00")

    async def test_new_end_must_be_later(self, renew_use_case, subscription):
        result = await renew_use_case.execute(
            8, RenewSubscriptionCommandDTO(new_end_date=subscription.end_date), now=NOW
        )

        assert result.error.code == "INVALID_INPUT"

    async def test_other_active_subscription_conflicts(self, renew_use_case, subscription, subscription_repo):
        subscription_repo.get_current_for_agency = AsyncMock(return_value=MagicMock(id=9))

        result = await renew_use_case.execute(
            8, RenewSubscriptionCommandDTO(new_end_date=subscription.end_date + timedelta(days=30)), now=NOW
        )

        assert result.error.code == "SUBSCRIPTION_ALREADY_ACTIVE"
        subscription_repo.get_current_for_agency.assert_called_once_with(7, NOW, exclude_id=8)

    async def test_failed_renewal_charge_keeps_old_end(self, renew_use_case, subscription, mock_gateway):
        old_end = subscription.end_date
        mock_gateway.charge = AsyncMock(side_effect=PaymentDeclined("card_declined"))

        result = await renew_use_case.execute(
            8, RenewSubscriptionCommandDTO(new_end_date=old_end + timedelta(days=30), payment_method_id="pm_1"),
            now=NOW,
        )

        assert result.error.code == "PAYMENT_DECLINED"
        assert subscription.end_date == old_end


@pytest.mark.asyncio
class TestCancelAndUpdateSubscription:

    @pytest.fixture
    def subscription(self, subscription_repo):
        subscription = Subscription(
            id=8,
            agency_id=7,
            plan_id=1,
            start_date=START,
            end_date=START + timedelta(days=30),
        )
        subscription_repo.get_by_id = AsyncMock(return_value=subscription)
        return subscription

    async def test_cancel_twice(self, mock_uow, subscription_repo, subscription):
        use_case = CancelSubscription(uow=mock_uow, subscription_repo=subscription_repo)

        first = await use_case.execute(8)
        second = await use_case.execute(8)

        assert first.value.status == "cancelled"
        assert first.value.is_active is False
        assert second.error.code == "ALREADY_CANCELLED"

    async def test_update_end_date_before_start(self, mock_uow, plan_repo, subscription_repo, subscription):
        use_case = UpdateSubscription(uow=mock_uow, plan_repo=plan_repo, subscription_repo=subscription_repo)

        result = await use_case.execute(
            8, UpdateSubscriptionCommandDTO(end_date=START - timedelta(days=1))
        )

        assert result.error.code == "INVALID_INPUT"

    async def test_deactivate_via_update(self, mock_uow, plan_repo, subscription_repo, subscription):
        use_case = UpdateSubscription(uow=mock_uow, plan_repo=plan_repo, subscription_repo=subscription_repo)

        result = await use_case.execute(8, UpdateSubscriptionCommandDTO(is_active=False, auto_renew=False))

        assert result.value.is_active is False
        assert result.value.status == "cancelled"
        assert result.value.auto_renew is False

    async def test_reactivation_conflicts_with_other_current_subscription(
        self, mock_uow, plan_repo, subscription_repo, subscription
    ):
        """
        Given: A cancelled subscription and a newer active one for the same agency
        When: The cancelled one is switched back on by update
        Then: SUBSCRIPTION_ALREADY_ACTIVE and nothing is written
        """
        subscription.is_active = False
        subscription.status = SubscriptionStatus.CANCELLED
        subscription_repo.get_current_for_agency = AsyncMock(return_value=MagicMock(id=9))
        use_case = UpdateSubscription(uow=mock_uow, plan_repo=plan_repo, subscription_repo=subscription_repo)

        result = await use_case.execute(8, UpdateSubscriptionCommandDTO(is_active=True), now=NOW)

        assert result.error.code == "SUBSCRIPTION_ALREADY_ACTIVE"
        subscription_repo.get_current_for_agency.assert_called_once_with(7, NOW, exclude_id=8)
        subscription_repo.update.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_extending_end_date_checks_for_conflict(
        self, mock_uow, plan_repo, subscription_repo, subscription
    ):
        subscription_repo.get_current_for_agency = AsyncMock(return_value=MagicMock(id=9))
        use_case = UpdateSubscription(uow=mock_uow, plan_repo=plan_repo, subscription_repo=subscription_repo)

        result = await use_case.execute(
            8, UpdateSubscriptionCommandDTO(end_date=START + timedelta(days=60)), now=NOW
        )

        assert result.error.code == "SUBSCRIPTION_ALREADY_ACTIVE"

    async def test_expired_subscription_update_skips_conflict_check(
        self, mock_uow, plan_repo, subscription_repo, subscription
    ):
        use_case = UpdateSubscription(uow=mock_uow, plan_repo=plan_repo, subscription_repo=subscription_repo)

        result = await use_case.execute(
            8, UpdateSubscriptionCommandDTO(auto_renew=False), now=START + timedelta(days=45)
        )

        assert result.is_ok()
        subscription_repo.get_current_for_agency.assert_not_called()

    async def test_pending_subscription_cannot_be_activated_by_hand(
        self, mock_uow, plan_repo, subscription_repo, subscription
    ):
        subscription.is_active = False
        subscription.status = SubscriptionStatus.PENDING
        use_case = UpdateSubscription(uow=mock_uow, plan_repo=plan_repo, subscription_repo=subscription_repo)

        result = await use_case.execute(8, UpdateSubscriptionCommandDTO(is_active=True), now=NOW)

        assert result.error.code == "INVALID_STATE"
        assert subscription.status == SubscriptionStatus.PENDING
