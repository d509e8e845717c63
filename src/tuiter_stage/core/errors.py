"""Domain errors raised by the service layer.

Every error here is recoverable at the API boundary. The application's
exception handler translates each kind to its ``status_code`` and message;
services never retry them internally.
"""

from __future__ import annotations


class TuiterError(RuntimeError):
    """Base class for client-visible failures."""

    status_code: int = 400
    default_message: str = "Request failed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class NotAuthenticatedError(TuiterError):
    """No principal is bound to the current session."""

    status_code = 401
    default_message = "Please login first."


class NoPermissionError(TuiterError):
    status_code = 403
    default_message = "No permission on this operation."


class NoSuchUserError(TuiterError):
    status_code = 404
    default_message = "No such user."


class NoSuchTuitError(TuiterError):
    status_code = 404
    default_message = "No such tuit."


class UserAlreadyExistsError(TuiterError):
    status_code = 409
    default_message = "User already exists."


class InvalidInputError(TuiterError):
    """Malformed identifier or missing required field."""

    status_code = 400
    default_message = "Received invalid inputs."


class EmptyContentError(TuiterError):
    status_code = 400
    default_message = "Empty tuit content."


class MultiTypeMediaError(TuiterError):
    """Both image and video content were supplied for one tuit."""

    status_code = 400
    default_message = "Received both image and video content."


class MediaContentExceedsLimitError(TuiterError):
    status_code = 413
    default_message = "Received media content that exceeds limit."


class UnsupportedMediaError(TuiterError):
    """A file's content type does not match the attachment kind it was sent as."""

    status_code = 415
    default_message = "Unsupported media type."
