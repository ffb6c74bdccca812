"""
This module implements the gamanip error taxonomy
"""

# Standard
from typing import Any, List, Optional
import datetime
import os
import traceback

# Local
from . import constants

_THIS_FILE = os.path.abspath(__file__)


def _call_site() -> str:
    """Build a marker for the frame that constructed an error, skipping the
    frames inside this module
    """
    for frame in reversed(traceback.extract_stack()):
        if os.path.abspath(frame.filename) != _THIS_FILE:
            return f"- {frame.name} ({frame.filename}:{frame.lineno})"
    return "- <unknown>"


## Base Error ##################################################################


class GamanipError(Exception):
    """Base class for all gamanip exceptions"""

    def __init__(self, message: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = (
            status_code if status_code is not None else constants.INTERNAL_ERROR_STATUS
        )
        self.internal_code = f"{self.status_code}-{type(self).__name__}"
        self.timestamp = datetime.datetime.now()
        self.fail_site = _call_site()

    def __str__(self) -> str:
        return f"[{self.status_code}]{{{self.internal_code}}} {self.message}"

    def to_dict(self) -> dict:
        """Structured record for logs and serialization"""
        return {
            "status_code": self.status_code,
            "message": self.message,
            "internal_code": self.internal_code,
            "fail_site": self.fail_site,
            "timestamp": self.timestamp.isoformat(),
        }


## Local Errors ################################################################


class ValidationError(GamanipError):
    """A local precondition was not met. These are raised before any remote
    call is made and are never retried.
    """

    def __init__(
        self,
        message: str = "",
        status_code: int = constants.PRECONDITION_FAILED_STATUS,
    ):
        super().__init__(message, status_code)


## Remote Errors ###############################################################


class RemoteServiceError(GamanipError):
    """A rejection from the remote management API in a uniform shape.

    The errors list holds the structured sub-errors of the response (dicts with
    at least a "reason" key). The backoff wrapper uses the first entry to decide
    whether the call is retried.
    """

    def __init__(
        self,
        message: str = "",
        status_code: Optional[int] = None,
        error_type: Any = None,
        errors: Optional[List[dict]] = None,
    ):
        super().__init__(message, status_code)
        self.error_type = error_type
        self.errors = list(errors or [])

    @classmethod
    def from_response(
        cls,
        status_code: int,
        status_text: str = "",
        message: str = "",
        error: Any = None,
    ) -> "RemoteServiceError":
        """Build from the pieces of a rejected response

        Args:
            status_code:  int
                The http status of the response
            status_text:  str
                The http status message of the response
            message:  str
                The error message of the failed call
            error:  Any
                The vendor error body. When it is a dict, its "errors" list is
                kept for classification and its "code" (or "status") is used as
                the vendor error type.

        Returns:
            error:  RemoteServiceError
                The uniform error
        """
        errors = []
        error_type = error
        if isinstance(error, dict):
            errors = error.get("errors") or []
            error_type = error.get("status", error.get("code"))
        full_message = " ".join(part for part in (status_text, message) if part)
        return cls(
            message=full_message,
            status_code=status_code,
            error_type=error_type,
            errors=errors,
        )

    @property
    def reason(self) -> Optional[str]:
        """The reason of the first structured sub-error, if any"""
        if self.errors and isinstance(self.errors[0], dict):
            return self.errors[0].get("reason")
        return None

    def __str__(self) -> str:
        return f"[{self.status_code}/{self.internal_code}] {self.message}"

    def to_dict(self) -> dict:
        record = super().to_dict()
        record["error_type"] = self.error_type
        record["reason"] = self.reason
        return record


## Boundary Errors #############################################################


class GenericServiceError(GamanipError):
    """Wraps an arbitrary error at the reconciler boundary.

    When the wrapped error is a gamanip error, its call site is appended to the
    chain inherited from it (if it was itself a GenericServiceError) so that
    the full causal path can be rendered with to_debug().
    """

    def __init__(self, error: Any = None, status_code: Optional[int] = None):
        if isinstance(error, BaseException):
            message = getattr(error, "message", None) or str(error)
        else:
            message = "" if error is None else str(error)
        if isinstance(error, GamanipError):
            status_code = error.status_code
        super().__init__(message, status_code)
        self.cause = error if isinstance(error, BaseException) else None
        if isinstance(error, GamanipError):
            self.internal_code = error.internal_code
        self.stacks: List[str] = list(getattr(error, "stacks", None) or [])
        if isinstance(error, GamanipError):
            self.stacks.append(error.fail_site)
        if isinstance(error, BaseException):
            self.__cause__ = error

    def __str__(self) -> str:
        return (
            f"[{self.status_code}]{{{self.internal_code}}} {self.message}: "
            f"{self.fail_site.lstrip('- ')}"
        )

    def to_dict(self) -> dict:
        record = super().to_dict()
        record["stacks"] = list(self.stacks)
        if self.cause is not None:
            record["cause"] = type(self.cause).__name__
        return record

    def to_debug(self) -> str:
        """Verbose multi-line rendering including the full causal chain"""
        lines = [
            self.timestamp.isoformat(),
            f"[{self.status_code}]{{{self.internal_code}}} {self.message}",
            self.fail_site,
        ]
        lines.extend(self.stacks)
        if self.cause is not None and not isinstance(self.cause, GamanipError):
            lines.extend(
                line.rstrip()
                for line in traceback.format_exception(
                    type(self.cause), self.cause, self.cause.__traceback__
                )
            )
        return "\n".join(lines)


## Assertions ##################################################################


def assert_precondition(
    condition: bool,
    message: str = "",
    status_code: int = constants.PRECONDITION_FAILED_STATUS,
):
    """Replacement for assert() which will throw a ValidationError. This should
    be used to check local preconditions before any remote call is made.
    """
    if not condition:
        raise ValidationError(message, status_code)
