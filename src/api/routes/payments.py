"""Payment API Routes

FastAPI routes for payments, refunds and the gateway webhook.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Header, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from libs.result import Error
from src.app.services.inventory_ledger import InventoryLedger
from src.app.services.notification_service import NotificationService
from src.app.services.payment_gateway import PaymentGateway, WebhookSignatureError
from src.app.use_cases.payments import (
    GetPayment,
    RefundPayment,
    ReconcilePaymentEvent,
    ValidatePaymentMethod,
    PaymentResponseDTO,
    PaymentMethodResponseDTO,
    RefundPaymentCommandDTO,
    WebhookReconcileResultDTO,
)
from src.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from src.adapter.repositories.reservation_repository import SqlAlchemyReservationRepository
from src.adapter.repositories.subscription_repository import SqlAlchemySubscriptionRepository
from src.adapter.repositories.vehicle_repository import SqlAlchemyVehicleRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.schemas.payment_request import (
    RefundPaymentRequestSchema,
    ValidatePaymentMethodRequestSchema,
)
from src.depends import get_session, get_payment_gateway, get_notification_service
from src.api.error import ClientError

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post(
    "/webhook",
    response_model=WebhookReconcileResultDTO,
    responses={
        400: {
            "description": "Signature verification failed",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_SIGNATURE",
                            "message": "Webhook signature verification failed"
                        }
                    }
                }
            }
        },
    }
)
async def payment_webhook(
    request: Request,
    stripe_signature: str = Header(default="", alias="stripe-signature"),
    session: AsyncSession = Depends(get_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Receive asynchronous payment outcomes from the gateway.

    Deliveries are idempotent: replaying an event returns `applied: false`
    and changes nothing.

    **Handled events:**
    - `payment_intent.succeeded`: completes the payment and confirms the
      pending reservation (or activates the subscription)
    - `payment_intent.payment_failed`: fails the payment and cancels the
      pending reservation

    **Returns:**
    - 200: Event processed (or ignored)
    - 400: Signature verification failed
    """
    payload = await request.body()

    try:
        event = payment_gateway.construct_webhook_event(payload, stripe_signature)
    except WebhookSignatureError as e:
        raise ClientError(
            Error(
                code="INVALID_SIGNATURE",
                message="Webhook signature verification failed",
                reason=e.message,
            )
        )

    vehicle_repo = SqlAlchemyVehicleRepository(session)
    reservation_repo = SqlAlchemyReservationRepository(session)

    use_case = ReconcilePaymentEvent(
        uow=SqlAlchemyUnitOfWork(session),
        payment_repo=SqlAlchemyPaymentRepository(session),
        reservation_repo=reservation_repo,
        subscription_repo=SqlAlchemySubscriptionRepository(session),
        vehicle_repo=vehicle_repo,
        inventory_ledger=InventoryLedger(vehicle_repo, reservation_repo),
        payment_gateway=payment_gateway,
        notification_service=notification_service,
    )
    result = await use_case.execute(event)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/methods/validate", response_model=PaymentMethodResponseDTO)
async def validate_payment_method(
    request: ValidatePaymentMethodRequestSchema,
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """
    Check with the gateway whether a payment method can be charged.

    **Returns:**
    - 200: `valid` flag and card details
    - 502: Payment gateway unavailable
    """
    result = await ValidatePaymentMethod(payment_gateway).execute(request.payment_method_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{payment_id}", response_model=PaymentResponseDTO)
async def get_payment(payment_id: int, session: AsyncSession = Depends(get_session)):
    """
    Retrieve a payment by ID.

    **Returns:**
    - 200: Payment found
    - 404: Payment not found
    """
    result = await GetPayment(SqlAlchemyPaymentRepository(session)).execute(payment_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{payment_id}/refund", response_model=PaymentResponseDTO)
async def refund_payment(
    payment_id: int,
    request: Optional[RefundPaymentRequestSchema] = None,
    session: AsyncSession = Depends(get_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """
    Refund a completed payment, fully or partially.

    **Request body (optional):**
    - `amount`: Amount to refund; omit for a full refund

    **Returns:**
    - 200: Payment `refunded` or `partially_refunded`
    - 400: Amount exceeds the payment
    - 404: Payment not found
    - 422: Payment is not completed
    - 502: Payment gateway unavailable
    """
    use_case = RefundPayment(
        uow=SqlAlchemyUnitOfWork(session),
        payment_repo=SqlAlchemyPaymentRepository(session),
        payment_gateway=payment_gateway,
    )
    command = RefundPaymentCommandDTO(amount=request.amount if request else None)
    result = await use_case.execute(payment_id, command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
