from __future__ import annotations

from enum import Enum

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    DUPLICATE = "duplicate"
    FORBIDDEN = "forbidden"
    UNAUTHENTICATED = "unauthenticated"
    INVALID = "invalid"
    CONFLICT = "conflict"


HTTP_STATUS = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.DUPLICATE: 409,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.INVALID: 422,
    ErrorKind.CONFLICT: 409,
}


class CarConnectError(Exception):
    """Domain error raised by services; the kind decides the HTTP status."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return HTTP_STATUS[self.kind]

    def to_dict(self) -> dict:
        return {"error": self.kind.value, "detail": self.message}


def not_found(what: str) -> CarConnectError:
    return CarConnectError(ErrorKind.NOT_FOUND, f"{what} no encontrado")


def duplicate(message: str) -> CarConnectError:
    return CarConnectError(ErrorKind.DUPLICATE, message)


def forbidden(message: str = "Sin permisos para esta marca") -> CarConnectError:
    return CarConnectError(ErrorKind.FORBIDDEN, message)


def commit_unique(db: Session, message: str) -> None:
    """Commit, turning a unique-constraint violation into a ``duplicate`` error."""
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise duplicate(message) from exc
