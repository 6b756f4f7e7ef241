"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    NOT_A_GROUP_MEMBER = "NOT_A_GROUP_MEMBER"
    USER_BANISHED = "USER_BANISHED"
    JOIN_COOLDOWN = "JOIN_COOLDOWN"
    OWNER_CANNOT_LEAVE = "OWNER_CANNOT_LEAVE"
    CANNOT_BANISH_OWNER = "CANNOT_BANISH_OWNER"

    # Not found errors (404)
    GROUP_NOT_FOUND = "GROUP_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_IN_GROUP = "NOT_IN_GROUP"
    JOIN_REQUEST_NOT_FOUND = "JOIN_REQUEST_NOT_FOUND"

    # Conflict errors (409)
    ALREADY_A_GROUP_MEMBER = "ALREADY_A_GROUP_MEMBER"
    GROUP_FULL = "GROUP_FULL"
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    CRYPTO_ERROR = "CRYPTO_ERROR"

    # Infrastructure errors (503)
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class CipherConfigurationError(RuntimeError):
    """Cipher key or IV is missing or malformed. Fatal at startup."""


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class GroupValidationError(AppException):
    """Group fields are malformed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )


class GroupNotFoundError(AppException):
    """Group not found."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.GROUP_NOT_FOUND,
            message=f"Group not found: {group_id}",
            status_code=404,
            details={"group_id": group_id},
        )


class InsufficientPermissionsError(AppException):
    """User does not have sufficient permissions."""

    def __init__(self, required_role: str = "owner") -> None:
        super().__init__(
            error_code=ErrorCode.INSUFFICIENT_PERMISSIONS,
            message=f"Insufficient permissions. Required role: {required_role}",
            status_code=403,
            details={"required_role": required_role},
        )


class NotAGroupMemberError(AppException):
    """Caller must be a group member to access its messages."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_A_GROUP_MEMBER,
            message="You are not a member of this group",
            status_code=403,
            details={"group_id": group_id},
        )


class UserBanishedError(AppException):
    """Banished users cannot join directly."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.USER_BANISHED,
            message="You are banished from this group",
            status_code=403,
            details={"group_id": group_id},
        )


class JoinCooldownError(AppException):
    """User left the group too recently to request again."""

    def __init__(self, group_id: str, retry_after_seconds: int) -> None:
        super().__init__(
            error_code=ErrorCode.JOIN_COOLDOWN,
            message="Cooldown in effect after leaving this group",
            status_code=403,
            details={
                "group_id": group_id,
                "retry_after_seconds": retry_after_seconds,
            },
        )


class OwnerCannotLeaveError(AppException):
    """The owner must transfer ownership before leaving."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.OWNER_CANNOT_LEAVE,
            message="Owner must transfer ownership first",
            status_code=403,
        )


class CannotBanishOwnerError(AppException):
    """The owner cannot be banished from their own group."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.CANNOT_BANISH_OWNER,
            message="The group owner cannot be banished",
            status_code=403,
        )


class NotInGroupError(AppException):
    """User tried to leave a group they do not belong to."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_IN_GROUP,
            message="Not a group member",
            status_code=400,
            details={"user_id": user_id},
        )


class JoinRequestNotFoundError(AppException):
    """No pending join request for the user."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.JOIN_REQUEST_NOT_FOUND,
            message="No such join request",
            status_code=400,
            details={"user_id": user_id},
        )


class AlreadyAGroupMemberError(AppException):
    """User is already a member of the group."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.ALREADY_A_GROUP_MEMBER,
            message="User is already a member of this group",
            status_code=409,
            details={"user_id": user_id},
        )


class GroupFullError(AppException):
    """Group has reached its member capacity."""

    def __init__(self, group_id: str, max_members: int) -> None:
        super().__init__(
            error_code=ErrorCode.GROUP_FULL,
            message=f"Group is full ({max_members} members)",
            status_code=409,
            details={"group_id": group_id, "max_members": max_members},
        )


class ConcurrentModificationError(AppException):
    """Group was changed by another writer between read and save."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.CONCURRENT_MODIFICATION,
            message="Group was modified concurrently, retry the request",
            status_code=409,
            details={"group_id": group_id},
        )


class CryptoError(AppException):
    """Message payload could not be encrypted or decrypted."""

    def __init__(self, message: str = "Message payload could not be decrypted") -> None:
        super().__init__(
            error_code=ErrorCode.CRYPTO_ERROR,
            message=message,
            status_code=500,
        )


class StoreUnavailableError(AppException):
    """The persistent store could not be reached."""

    def __init__(self, message: str = "Message store is unavailable") -> None:
        super().__init__(
            error_code=ErrorCode.STORE_UNAVAILABLE,
            message=message,
            status_code=503,
        )
