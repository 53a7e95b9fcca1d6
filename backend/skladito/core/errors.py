from __future__ import annotations


class SkladitoError(Exception):
    """Base class for failures raised by the warehouse core.

    Each subclass carries the HTTP status the handler layer responds with, so
    services never import anything from FastAPI.
    """

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SkladitoError):
    status_code = 400


class Unauthorized(SkladitoError):
    status_code = 401


class Forbidden(SkladitoError):
    status_code = 403


class NotFound(SkladitoError):
    status_code = 404


class Conflict(SkladitoError):
    status_code = 409


class Expired(SkladitoError):
    status_code = 410


class StoreError(SkladitoError):
    status_code = 500


class StoreUnavailable(StoreError):
    status_code = 503
