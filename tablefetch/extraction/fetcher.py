"""HTTP fetcher: one GET per call, no retries."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Mapping, Sequence

import httpx

from .errors import NetworkError
from .models import FetchResult

if TYPE_CHECKING:
    from tablefetch.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "tablefetch/0.1.0"


@dataclass(frozen=True)
class FetchRequest:
    url: str
    query: Mapping[str, str] = field(default_factory=dict)


def _to_result(response: httpx.Response) -> FetchResult:
    return FetchResult(
        url=str(response.url),
        status_code=response.status_code,
        content_type=response.headers.get("content-type", ""),
        content=response.content,
        encoding=response.charset_encoding,
    )


def _raise_for_status(url: str, response: httpx.Response) -> None:
    if not response.is_success:
        logger.warning(
            "fetch returned non-2xx status",
            extra={"url": url, "status_code": response.status_code},
        )
        raise NetworkError(
            f"GET {url} returned HTTP {response.status_code}",
            url=url,
            status_code=response.status_code,
        )


class Fetcher:
    """Issues GET requests and wraps the response in a :class:`FetchResult`.

    ``transport`` is handed to the underlying httpx clients, which lets
    tests plug in an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        follow_redirects: bool = True,
        transport: httpx.BaseTransport | httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._user_agent = user_agent
        self._follow_redirects = follow_redirects
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> Fetcher:
        return cls(
            timeout=settings.fetch_timeout,
            user_agent=settings.user_agent,
            follow_redirects=settings.follow_redirects,
        )

    def _client_kwargs(self) -> dict:
        kwargs: dict = {
            "timeout": self._timeout,
            "follow_redirects": self._follow_redirects,
            "headers": {"User-Agent": self._user_agent},
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return kwargs

    def fetch(self, url: str, query: Mapping[str, str] | None = None) -> FetchResult:
        """GET *url* with *query* appended; raise :class:`NetworkError` on failure."""
        logger.debug("fetching", extra={"url": url, "query": dict(query or {})})
        try:
            with httpx.Client(**self._client_kwargs()) as client:
                response = client.get(url, params=query or None)
        except httpx.TimeoutException as exc:
            logger.warning("fetch timed out", extra={"url": url, "timeout": self._timeout})
            raise NetworkError(f"GET {url} timed out after {self._timeout}s", url=url) from exc
        except httpx.HTTPError as exc:
            logger.warning("fetch failed", extra={"url": url}, exc_info=True)
            raise NetworkError(f"GET {url} failed: {exc}", url=url) from exc

        _raise_for_status(url, response)
        result = _to_result(response)
        logger.debug(
            "fetched",
            extra={"url": result.url, "status_code": result.status_code, "bytes": len(result.content)},
        )
        return result

    async def afetch(self, url: str, query: Mapping[str, str] | None = None) -> FetchResult:
        """Async counterpart of :meth:`fetch` with identical semantics."""
        logger.debug("fetching", extra={"url": url, "query": dict(query or {})})
        try:
            async with httpx.AsyncClient(**self._client_kwargs()) as client:
                response = await client.get(url, params=query or None)
        except httpx.TimeoutException as exc:
            logger.warning("fetch timed out", extra={"url": url, "timeout": self._timeout})
            raise NetworkError(f"GET {url} timed out after {self._timeout}s", url=url) from exc
        except httpx.HTTPError as exc:
            logger.warning("fetch failed", extra={"url": url}, exc_info=True)
            raise NetworkError(f"GET {url} failed: {exc}", url=url) from exc

        _raise_for_status(url, response)
        result = _to_result(response)
        logger.debug(
            "fetched",
            extra={"url": result.url, "status_code": result.status_code, "bytes": len(result.content)},
        )
        return result

    async def fetch_many(
        self,
        requests: Sequence[FetchRequest],
        max_concurrency: int = 4,
    ) -> list[FetchResult]:
        """Fetch several URLs concurrently, returning results in input order.

        The first failure propagates and the remaining fetches are cancelled.
        """
        if not requests:
            return []
        semaphore = asyncio.Semaphore(max_concurrency)

        async def _one(req: FetchRequest) -> FetchResult:
            async with semaphore:
                return await self.afetch(req.url, req.query)

        logger.debug(
            "fetching batch",
            extra={"request_count": len(requests), "max_concurrency": max_concurrency},
        )
        tasks = [asyncio.create_task(_one(req)) for req in requests]
        try:
            return list(await asyncio.gather(*tasks))
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()


def fetch(
    url: str,
    query: Mapping[str, str] | None = None,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> FetchResult:
    """Fetch *url* with a default-configured :class:`Fetcher`."""
    return Fetcher(timeout=timeout).fetch(url, query)
