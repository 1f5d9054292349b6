"""Structured service errors.

Every layer wraps the error it received with its operation name and a
private diagnostic message. A public message can be attached anywhere in the
chain; the HTTP layer surfaces the outermost one and logs the full chain.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Machine-readable error categories, mapped to HTTP statuses at the edge."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    INTERNAL = "internal"


class ServiceError(Exception):
    """An error annotated with operation context.

    ``kind`` is taken from the innermost ``ServiceError`` that set one
    explicitly; foreign exceptions (database driver errors and the like)
    count as ``INTERNAL``.
    """

    def __init__(
        self,
        op: str = "",
        message: str = "",
        *,
        kind: ErrorKind | None = None,
        public_message: str | None = None,
        cause: BaseException | None = None,
    ):
        self.op = op
        self.message = message
        self._kind = kind
        self._public_message = public_message
        self.cause = cause
        super().__init__(str(self))

    @property
    def kind(self) -> ErrorKind:
        if self._kind is not None:
            return self._kind
        if isinstance(self.cause, ServiceError):
            return self.cause.kind
        return ErrorKind.INTERNAL

    @property
    def public_message(self) -> str:
        """The outermost public message in the chain, or an empty string."""
        if self._public_message:
            return self._public_message
        if isinstance(self.cause, ServiceError):
            return self.cause.public_message
        return ""

    def with_public_message(self, public_message: str) -> ServiceError:
        self._public_message = public_message
        return self

    def root_cause(self) -> BaseException:
        err: BaseException = self
        while isinstance(err, ServiceError) and err.cause is not None:
            err = err.cause
        return err

    def __str__(self) -> str:
        op = f"[{self.op}]: " if self.op else "_: "
        msg = f"[{self.message}] >> " if self.message else "_ >> "
        if self.cause is not None:
            return f"{op}{msg}{self.cause}"
        return f"{op}{msg}<{self.kind.value}> {self.message}"

    @classmethod
    def validation(cls, op: str, message: str) -> ServiceError:
        return cls(op, message, kind=ErrorKind.VALIDATION, public_message=message)

    @classmethod
    def not_found(cls, op: str, message: str) -> ServiceError:
        return cls(op, message, kind=ErrorKind.NOT_FOUND, public_message=message)

    @classmethod
    def conflict(cls, op: str, message: str) -> ServiceError:
        return cls(op, message, kind=ErrorKind.CONFLICT, public_message=message)

    @classmethod
    def unauthorized(cls, op: str, message: str = "") -> ServiceError:
        return cls(op, message, kind=ErrorKind.UNAUTHORIZED, public_message=message)

    @classmethod
    def forbidden(cls, op: str, message: str = "") -> ServiceError:
        return cls(op, message, kind=ErrorKind.FORBIDDEN, public_message=message)


def wrap(
    err: BaseException,
    op: str,
    message: str = "",
    public_message: str | None = None,
) -> ServiceError:
    """Add operation context to ``err``.

    Use as ``raise wrap(exc, op, "getting product ids") from exc``.
    """
    return ServiceError(op, message, public_message=public_message, cause=err)
