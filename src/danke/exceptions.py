# danke/exceptions.py
from enum import Enum


class ErrorKind(str, Enum):
    NOT_SIGNED_IN = "NOT_SIGNED_IN"
    ACCESS_DENIED = "ACCESS_DENIED"
    EXPIRED = "EXPIRED"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    SELF_REFERENCE = "SELF_REFERENCE"


STATUS_CODES = {
    ErrorKind.NOT_SIGNED_IN: 401,
    ErrorKind.ACCESS_DENIED: 403,
    ErrorKind.EXPIRED: 410,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.ALREADY_EXISTS: 409,
    ErrorKind.SELF_REFERENCE: 400,
}


def status_code_for(kind: ErrorKind) -> int:
    return STATUS_CODES[kind]


class DankeException(Exception):
    kind: ErrorKind = ErrorKind.VALIDATION_ERROR
    default_message = "Invalid request"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return status_code_for(self.kind)


class NotSignedInException(DankeException):
    kind = ErrorKind.NOT_SIGNED_IN
    default_message = "Authentication required"


class AccessDeniedException(DankeException):
    kind = ErrorKind.ACCESS_DENIED
    default_message = "Access denied"


class BoardExpiredException(DankeException):
    kind = ErrorKind.EXPIRED
    default_message = "Board has expired"


class NotFoundException(DankeException):
    kind = ErrorKind.NOT_FOUND
    default_message = "Not found"


class BoardNotFoundException(NotFoundException):
    default_message = "Board not found"


class PostNotFoundException(NotFoundException):
    default_message = "Post not found"


class UserNotFoundException(NotFoundException):
    default_message = "User not found with this email address"


class ForbiddenException(DankeException):
    kind = ErrorKind.FORBIDDEN
    default_message = "You don't have permission to perform this action"


class ValidationException(DankeException):
    kind = ErrorKind.VALIDATION_ERROR


class AlreadyExistsException(DankeException):
    kind = ErrorKind.ALREADY_EXISTS
    default_message = "User is already a moderator of this board"


class SelfReferenceException(DankeException):
    kind = ErrorKind.SELF_REFERENCE
    default_message = "Board creator cannot be added as a moderator"


_EXCEPTIONS = {
    ErrorKind.NOT_SIGNED_IN: NotSignedInException,
    ErrorKind.ACCESS_DENIED: AccessDeniedException,
    ErrorKind.EXPIRED: BoardExpiredException,
    ErrorKind.NOT_FOUND: NotFoundException,
    ErrorKind.FORBIDDEN: ForbiddenException,
    ErrorKind.VALIDATION_ERROR: ValidationException,
    ErrorKind.ALREADY_EXISTS: AlreadyExistsException,
    ErrorKind.SELF_REFERENCE: SelfReferenceException,
}


def exception_for(kind: ErrorKind, message: str = None) -> DankeException:
    return _EXCEPTIONS[kind](message)
