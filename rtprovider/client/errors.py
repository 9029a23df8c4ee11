"""Exceptions raised by the Artifactory HTTP client."""

from typing import Optional

import httpx


class APIError(RuntimeError):
    """An HTTP request that failed after all retries.

    ``status_code`` is None when no response was ever received.
    """

    def __init__(
        self,
        status_code: Optional[int],
        method: str,
        url: str,
        body: str,
        response: Optional[httpx.Response] = None,
    ):
        self.status_code = status_code
        self.method = method
        self.url = url
        self.body = body
        self.response = response
        status = status_code if status_code is not None else "no response"
        super().__init__(f"\n{status} {method} {url}\n{body}")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "APIError":
        request = response.request
        return cls(
            status_code=response.status_code,
            method=request.method,
            url=str(request.url),
            body=response.text,
            response=response,
        )

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class ConfigurationError(ValueError):
    """Provider configuration is missing or inconsistent."""


class OperationCancelled(RuntimeError):
    """The operation's context was cancelled or ran past its deadline."""
