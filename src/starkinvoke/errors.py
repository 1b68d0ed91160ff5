"""
Error taxonomy for a single invoke run.

Each boundary raises its own kind so a caller can decide whether to
retry, fix its settings, or give up:

- ConfigurationError: settings missing or malformed, raised before any I/O
- EncodingError:      target address, argument or function name unusable
- SubmissionError:    anything that went wrong after submission started

The CLI maps every class to its ``exit_code``.
"""

from __future__ import annotations

from typing import Any, Optional


class StarkInvokeError(RuntimeError):
    exit_code: int = 1


class ConfigurationError(StarkInvokeError):
    exit_code = 2


class EncodingError(StarkInvokeError):
    exit_code = 3


class SubmissionError(StarkInvokeError):
    exit_code = 4


class NetworkError(SubmissionError):
    exit_code = 5


class SigningError(SubmissionError):
    exit_code = 6


class NodeRejectedError(SubmissionError):
    """The node answered with a JSON-RPC error object."""

    exit_code = 7

    def __init__(self, code: int, message: str, data: Optional[Any] = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        detail = f"RPC error {code}: {message}"
        if data is not None:
            detail += f" ({data})"
        super().__init__(detail)


class MalformedResponseError(SubmissionError):
    exit_code = 8
