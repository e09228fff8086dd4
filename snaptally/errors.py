"""Typed failures raised by the recognition and analysis layers."""

from __future__ import annotations


class OCRError(RuntimeError):
    """Base class for failures of an image analysis request."""


class LocalOCRUnavailable(OCRError):
    """The local text recognition capability is not installed or usable."""


class LocalOCRFailure(OCRError):
    """The local text recognition call itself failed."""


class RemoteAnalysisFailure(OCRError):
    """The remote price tag analysis call failed.

    ``status_code`` is set when the server answered with a non-2xx status,
    ``body`` holds the response text in that case.
    """

    def __init__(
        self, message: str, status_code: int | None = None, body: str = ""
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
