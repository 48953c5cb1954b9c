"""API error translation

Use cases return Error values; routes raise ClientError, which the app
renders as {"error": {"code", "message"}}. The internal reason is logged,
never returned.
"""

from typing import Optional
from fastapi import status
from libs.result import Error

STATUS_BY_CODE = {
    "INVALID_INPUT": status.HTTP_400_BAD_REQUEST,
    "INVALID_SIGNATURE": status.HTTP_400_BAD_REQUEST,
    "PAYMENT_DECLINED": status.HTTP_402_PAYMENT_REQUIRED,
    "RESERVATION_CONFLICT": status.HTTP_409_CONFLICT,
    "PLATE_NUMBER_TAKEN": status.HTTP_409_CONFLICT,
    "EMAIL_TAKEN": status.HTTP_409_CONFLICT,
    "CONTRACT_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "SUBSCRIPTION_ALREADY_ACTIVE": status.HTTP_409_CONFLICT,
    "REVIEW_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "VEHICLE_IN_USE": status.HTTP_409_CONFLICT,
    "PLAN_IN_USE": status.HTTP_409_CONFLICT,
    "ALREADY_CANCELLED": status.HTTP_410_GONE,
    "INVALID_STATE": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "PAYMENT_FAILED": status.HTTP_502_BAD_GATEWAY,
}


def status_for(code: str) -> int:
    if code.endswith("_NOT_FOUND"):
        return status.HTTP_404_NOT_FOUND
    return STATUS_BY_CODE.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)


class ClientError(Exception):
    """Error surfaced to the API client"""

    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or status_for(error.code)

    def to_body(self) -> dict:
        return {"error": {"code": self.error.code, "message": self.error.message}}
