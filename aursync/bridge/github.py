"""GitHub REST client backed by httpx.

Authentication is carried in an explicit ``RequestContext`` handed to the
client at construction; nothing is read from process-wide state during a
request.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import BaseModel, ConfigDict

from aursync.bridge import FetchResponse
from aursync.core.errors import NetworkError

logger = logging.getLogger(__name__)

API_JSON = "application/vnd.github.v3+json"
OCTET_STREAM = "application/octet-stream"


class RequestContext(BaseModel):
    """Per-run request settings for GitHub."""

    model_config = ConfigDict(frozen=True)

    token: str | None = None
    api_base: str = "https://api.github.com"
    user_agent: str = "AUR updates"
    timeout: float = 30.0
    retries: int = 2

    def headers(self, binary: bool = False) -> dict[str, str]:
        headers = {
            "Accept": OCTET_STREAM if binary else API_JSON,
            "User-Agent": self.user_agent,
        }
        if self.token:
            headers["Authorization"] = f"Token {self.token}"
        return headers


class GitHubClient:
    """Synchronous GitHub client satisfying the ``Fetcher`` protocol.

    A single ``httpx.Client`` is shared by every request; it is safe to
    call ``fetch`` from several threads at once.

    Parameters
    ----------
    context:
        Token, API base URL, user agent and timeouts.
    transport:
        Optional httpx transport, mainly for tests
        (``httpx.MockTransport``).
    """

    def __init__(
        self,
        context: RequestContext | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._context = context or RequestContext()
        self._client = httpx.Client(
            timeout=httpx.Timeout(self._context.timeout),
            follow_redirects=True,
            transport=transport or httpx.HTTPTransport(retries=self._context.retries),
        )

    @property
    def context(self) -> RequestContext:
        return self._context

    def resolve_url(self, url: str) -> str:
        """Absolute URLs pass through; paths are joined to the API base."""
        if url.startswith("http"):
            return url
        return self._context.api_base.rstrip("/") + "/" + url.lstrip("/")

    def fetch(self, method: str, url: str, binary: bool = False) -> FetchResponse:
        target = self.resolve_url(url)
        logger.debug("%s %s (binary=%s)", method, target, binary)
        try:
            response = self._client.request(
                method, target, headers=self._context.headers(binary)
            )
        except httpx.HTTPError as exc:
            raise NetworkError(f"{method} {target} failed: {exc}") from exc
        return FetchResponse(status=response.status_code, body=response.text)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
