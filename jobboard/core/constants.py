"""Domain enums and response codes."""

from enum import Enum, IntEnum


class Role(str, Enum):
    """Account roles."""

    USER = "USER"
    COMPANY = "COMPANY"
    ADMIN = "ADMIN"


class CompanyStatus(IntEnum):
    """Company approval status (stored as integer)."""

    PENDING = -1
    REJECTED = 0
    APPROVED = 1


class OrderStatus(str, Enum):
    """Payment status of a VIP package order."""

    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


TERMINAL_ORDER_STATUSES = (OrderStatus.SUCCESS, OrderStatus.FAILED)


class VipPackageLevel(IntEnum):
    """VIP package tiers; the integer value is the stored priority rank."""

    BASIC = 0
    SILVER = 1
    GOLD = 2
    PLATINUM = 3
    DIAMOND = 4

    @classmethod
    def from_label(cls, label: str) -> "VipPackageLevel":
        try:
            return cls[label.strip().upper()]
        except KeyError:
            raise ValueError(f"Invalid VIP package level: {label}") from None

    @classmethod
    def labels(cls) -> list:
        return [level.name for level in cls]


def validate_vip_package_levels() -> None:
    """Check that tier ranks are contiguous from 0 and labels round-trip.

    Called once at startup.
    """
    ranks = sorted(level.value for level in VipPackageLevel)
    if ranks != list(range(len(ranks))):
        raise RuntimeError(f"VIP package ranks must be contiguous from 0, got {ranks}")
    for level in VipPackageLevel:
        if VipPackageLevel.from_label(level.name) is not level:
            raise RuntimeError(f"VIP package label {level.name} does not map back to itself")
        if VipPackageLevel(level.value) is not level:
            raise RuntimeError(f"VIP package rank {level.value} is aliased")


class MessageCode:
    """``message_code`` values for successful responses."""

    CREATED_SUCCESS = "CREATED_SUCCESS"
    UPDATED_SUCCESS = "UPDATED_SUCCESS"
    DELETED_SUCCESS = "DELETED_SUCCESS"
    GET_SUCCESS = "GET_SUCCESS"
    GET_ALL_SUCCESS = "GET_ALL_SUCCESS"
    LOGIN_SUCCESS = "LOGIN_SUCCESS"


class ErrorCode:
    """``error_code`` values for failed responses."""

    # Validation
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ID_REQUIRED = "ID_REQUIRED"
    EMAIL_REQUIRED = "EMAIL_REQUIRED"
    REASON_REJECT_REQUIRED = "REASON_REJECT_REQUIRED"
    INVALID_STATUS = "INVALID_STATUS"
    INVALID_FILE = "INVALID_FILE"
    CANNOT_UPDATE_ACTIVE_PACKAGE = "CANNOT_UPDATE_ACTIVE_PACKAGE"

    # Auth
    UNAUTHORIZED = "UNAUTHORIZED"
    TOKEN_REQUIRED = "TOKEN_REQUIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCOUNT_IS_LOCKED = "ACCOUNT_IS_LOCKED"
    COMPANY_NOT_APPROVED = "COMPANY_NOT_APPROVED"
    FORBIDDEN = "FORBIDDEN"

    # State
    NOT_FOUND = "NOT_FOUND"
    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    ORDER_ALREADY_FINALIZED = "ORDER_ALREADY_FINALIZED"
    NO_AVAILABLE_POST_CREDIT = "NO_AVAILABLE_POST_CREDIT"

    # Server
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
