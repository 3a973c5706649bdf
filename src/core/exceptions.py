"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    NOT_A_MEMBER = "NOT_A_MEMBER"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    NODE_OPERATION_DENIED = "NODE_OPERATION_DENIED"

    # Not found errors (404)
    SPACE_NOT_FOUND = "SPACE_NOT_FOUND"
    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"
    NODE_NOT_FOUND = "NODE_NOT_FOUND"
    RUBBISH_NODE_NOT_FOUND = "RUBBISH_NODE_NOT_FOUND"
    ATTACHMENT_NOT_FOUND = "ATTACHMENT_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NODE_OPERATION_INVALID = "NODE_OPERATION_INVALID"
    CANNOT_REMOVE_OWNER = "CANNOT_REMOVE_OWNER"
    VERIFICATION_CODE_INVALID = "VERIFICATION_CODE_INVALID"

    # Unprocessable (422)
    RUBBISH_NODE_POSITION_LOST = "RUBBISH_NODE_POSITION_LOST"

    # Conflict errors (409)
    MEMBER_CONFLICT = "MEMBER_CONFLICT"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


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


class PermissionDeniedError(AppException):
    """A delegated permission check failed."""

    def __init__(
        self,
        message: str = "Access denied",
        error_code: ErrorCode = ErrorCode.FORBIDDEN,
        details: Any | None = None,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=403,
            details=details,
        )


class NotAMemberError(PermissionDeniedError):
    """User is not an active member of the space."""

    def __init__(self, space_id: str) -> None:
        super().__init__(
            message="You are not a member of this space",
            error_code=ErrorCode.NOT_A_MEMBER,
            details={"space_id": space_id},
        )


class InsufficientPermissionsError(PermissionDeniedError):
    """User does not have sufficient permissions."""

    def __init__(self, required_role: str = "admin") -> None:
        super().__init__(
            message=f"Insufficient permissions. Required role: {required_role}",
            error_code=ErrorCode.INSUFFICIENT_PERMISSIONS,
            details={"required_role": required_role},
        )


class NodeOperationDeniedError(PermissionDeniedError):
    """Member lacks the node permission required for the operation."""

    def __init__(self, node_id: str) -> None:
        super().__init__(
            message="You do not have permission to operate on this node",
            error_code=ErrorCode.NODE_OPERATION_DENIED,
            details={"node_id": node_id},
        )


class NotFoundError(AppException):
    """Base class for missing resources."""

    def __init__(self, error_code: ErrorCode, message: str, details: Any | None = None) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=404,
            details=details,
        )


class SpaceNotFoundError(NotFoundError):
    """Space not found."""

    def __init__(self, space_id: str) -> None:
        super().__init__(
            ErrorCode.SPACE_NOT_FOUND,
            f"Space not found: {space_id}",
            {"space_id": space_id},
        )


class MemberNotFoundError(NotFoundError):
    """Member not found."""

    def __init__(self, member_ref: str) -> None:
        super().__init__(
            ErrorCode.MEMBER_NOT_FOUND,
            f"Member not found: {member_ref}",
            {"member": member_ref},
        )


class NodeNotFoundError(NotFoundError):
    """Node not found or not live in the space."""

    def __init__(self, node_id: str) -> None:
        super().__init__(
            ErrorCode.NODE_NOT_FOUND,
            f"Node not found: {node_id}",
            {"node_id": node_id},
        )


class RubbishNodeNotFoundError(NotFoundError):
    """Node is not in the space's rubbish bin."""

    def __init__(self, node_id: str) -> None:
        super().__init__(
            ErrorCode.RUBBISH_NODE_NOT_FOUND,
            f"Node is not in the rubbish bin: {node_id}",
            {"node_id": node_id},
        )


class AttachmentNotFoundError(NotFoundError):
    """Attachment not found."""

    def __init__(self, token: str) -> None:
        super().__init__(
            ErrorCode.ATTACHMENT_NOT_FOUND,
            f"Attachment not found: {token}",
            {"token": token},
        )


class UserNotFoundError(NotFoundError):
    """User not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            ErrorCode.USER_NOT_FOUND,
            f"User not found: {user_id}",
            {"user_id": user_id},
        )


class ValidationFailedError(AppException):
    """Input rejected by a business rule."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details=details,
        )


class NodeOperationError(AppException):
    """Operation is not valid for this node."""

    def __init__(self, message: str, node_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NODE_OPERATION_INVALID,
            message=message,
            status_code=400,
            details={"node_id": node_id},
        )


class CannotRemoveOwnerError(AppException):
    """The space owner's membership cannot be removed."""

    def __init__(self, member_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.CANNOT_REMOVE_OWNER,
            message="The space owner cannot be removed",
            status_code=400,
            details={"member_id": member_id},
        )


class VerificationCodeError(AppException):
    """Verification code is wrong, expired or already used."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.VERIFICATION_CODE_INVALID,
            message="Verification code is invalid or has expired",
            status_code=400,
        )


class RubbishNodePositionError(AppException):
    """The pagination cursor node has left the rubbish bin."""

    def __init__(self, node_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.RUBBISH_NODE_POSITION_LOST,
            message="The last node is no longer in the rubbish bin, request again",
            status_code=422,
            details={"last_node_id": node_id},
        )


class MemberConflictError(AppException):
    """Concurrent write on the same (space, email) membership."""

    def __init__(self, space_id: str, email: str) -> None:
        super().__init__(
            error_code=ErrorCode.MEMBER_CONFLICT,
            message="A membership for this email was created concurrently",
            status_code=409,
            details={"space_id": space_id, "email": email},
        )
