"""HTTP client for the Artifactory REST API.

Wraps ``httpx.Client`` with a base URL, auth header injection, typed
errors and retry-on-predicate. Retry predicates look at a response and
decide whether the same request should be sent again; they exist because
Artifactory reports some transient failures only through the body text
or a nonstandard status code.
"""

import re
import threading
import time
from typing import Any, Callable, Dict, Iterable, Optional
from urllib.parse import urlparse

import httpx

from .. import __version__
from ..common.config import HttpConfig
from ..common.logger import get_logger
from .errors import APIError, ConfigurationError, OperationCancelled

logger = get_logger("http_client")

RetryCondition = Callable[[httpx.Response], bool]

MERGE_AND_SAVE_PATTERN = re.compile(r".*Could not merge and save new descriptor.*", re.DOTALL)


def body_matches(pattern: "re.Pattern[str]") -> RetryCondition:
    """Build a retry condition that fires when the response body matches."""

    def condition(response: httpx.Response) -> bool:
        return pattern.match(response.text) is not None

    return condition


# Artifactory sometimes fails concurrent descriptor writes with this message.
# The PUT/POST carries the full payload, so sending it again is safe.
retry_on_merge_error = body_matches(MERGE_AND_SAVE_PATTERN)


def retry_on_400(response: httpx.Response) -> bool:
    # HEAD on a missing repository can answer 400 rather than 404
    return response.status_code == 400


class Context:
    """Cancellation signal and optional deadline for one operation.

    Passed through every orchestrator call down to each HTTP attempt.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._cancelled = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    @classmethod
    def background(cls) -> "Context":
        """A context that is never cancelled and has no deadline."""
        return cls()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without one."""
        if self._deadline is None:
            return None
        return self._deadline - time.monotonic()

    def check(self) -> None:
        """Raise OperationCancelled if cancelled or past the deadline."""
        if self.cancelled:
            raise OperationCancelled("operation cancelled")
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise OperationCancelled("operation deadline exceeded")

    def wait(self, seconds: float) -> None:
        """Sleep for ``seconds``, waking early if cancelled."""
        remaining = self.remaining()
        if remaining is not None:
            seconds = min(seconds, max(remaining, 0))
        if self._cancelled.wait(seconds):
            raise OperationCancelled("operation cancelled")
        self.check()


class ArtifactoryClient:
    """Shared HTTP client handle.

    Read-only after construction, so one instance serves concurrent
    operations on different resources.
    """

    def __init__(
        self,
        base_url: str,
        headers: Optional[Dict[str, str]] = None,
        auth: Optional[httpx.Auth] = None,
        timeout: float = 30.0,
        retry_count: int = 5,
        retry_wait: float = 0.1,
        retry_max_wait: float = 2.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Scheme and host of the server (e.g. https://rt.example.com)
            headers: Headers sent with every request
            auth: Optional httpx auth (basic auth)
            timeout: Per-request timeout in seconds
            retry_count: Retries allowed after the first attempt
            retry_wait: Initial delay between retries (doubles each retry)
            retry_max_wait: Upper bound for the delay between retries
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url
        self.timeout = timeout
        self.retry_count = retry_count
        self.retry_wait = retry_wait
        self.retry_max_wait = retry_max_wait
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers or {},
            auth=auth,
            timeout=timeout,
            transport=transport,
        )

    @property
    def headers(self) -> httpx.Headers:
        return self._client.headers

    def close(self) -> None:
        self._client.close()

    def _timeout_for(self, ctx: Context) -> float:
        remaining = ctx.remaining()
        if remaining is None:
            return self.timeout
        return max(min(self.timeout, remaining), 0.001)

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        retry_conditions: Iterable[RetryCondition] = (),
        ctx: Optional[Context] = None,
    ) -> httpx.Response:
        """Send a request, retrying while a condition matches.

        Transport failures are always retried. Once the retry budget is
        spent, the last response's error is raised as-is.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            json: Optional JSON body, sent unchanged on every attempt
            retry_conditions: Predicates that ask for another attempt
            ctx: Cancellation context

        Returns:
            The successful response

        Raises:
            APIError: If the server answers >= 400 or never answers
            OperationCancelled: If ctx is cancelled between attempts
        """
        ctx = ctx or Context.background()
        conditions = list(retry_conditions)
        attempts = self.retry_count + 1
        delay = self.retry_wait
        response: Optional[httpx.Response] = None
        last_error: Optional[httpx.TransportError] = None

        for attempt in range(attempts):
            ctx.check()
            logger.debug(f"{method} {path} (attempt {attempt + 1}/{attempts})")
            try:
                response = self._client.request(
                    method, path, json=json, timeout=self._timeout_for(ctx)
                )
                last_error = None
            except httpx.TransportError as e:
                response = None
                last_error = e
                logger.warning(
                    f"{method} {path} failed (attempt {attempt + 1}/{attempts}): {e}"
                )
            else:
                if not any(condition(response) for condition in conditions):
                    break
                logger.warning(
                    f"{method} {path} returned {response.status_code}, retrying "
                    f"(attempt {attempt + 1}/{attempts})"
                )

            if attempt < attempts - 1:
                ctx.wait(delay)
                delay = min(delay * 2, self.retry_max_wait)

        if response is None:
            url = str(self._client.base_url.join(path))
            raise APIError(None, method, url, str(last_error)) from last_error
        if response.status_code >= 400:
            raise APIError.from_response(response)
        return response

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("PUT", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("DELETE", path, **kwargs)

    def head(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("HEAD", path, **kwargs)


def default_headers() -> Dict[str, str]:
    return {
        "content-type": "application/json",
        "accept": "*/*",
        "user-agent": f"rtprovider/{__version__}",
    }


def base_url_of(url: str) -> str:
    """Reduce a server URL to scheme://host[:port].

    Raises:
        ConfigurationError: If the URL is not absolute
    """
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ConfigurationError(f"invalid URL: {url!r}")
    return f"{parsed.scheme}://{parsed.netloc}"


def auth_options(
    username: str = "",
    password: str = "",
    api_key: str = "",
    access_token: str = "",
) -> Dict[str, Any]:
    """Pick exactly one credential: token, then API key, then basic auth.

    Returns:
        Keyword arguments for ArtifactoryClient (``headers`` and/or ``auth``)

    Raises:
        ConfigurationError: If no credential is usable
    """
    if access_token:
        return {"headers": {"Authorization": f"Bearer {access_token}"}}
    if api_key:
        return {"headers": {"X-JFrog-Art-Api": api_key}}
    if username and password:
        return {"headers": {}, "auth": httpx.BasicAuth(username, password)}
    raise ConfigurationError("no authentication details supplied")


def build_client(
    url: str,
    username: str = "",
    password: str = "",
    api_key: str = "",
    access_token: str = "",
    http: Optional[HttpConfig] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> ArtifactoryClient:
    """Create the shared client for a provider configuration."""
    http = http or HttpConfig()
    options = auth_options(username, password, api_key, access_token)
    headers = default_headers()
    headers.update(options.pop("headers"))
    return ArtifactoryClient(
        base_url_of(url),
        headers=headers,
        timeout=http.timeout,
        retry_count=http.retry_count,
        retry_wait=http.retry_wait,
        retry_max_wait=http.retry_max_wait,
        transport=transport,
        **options,
    )
