"""Synchronous HTTP client with retry behaviour for import drivers and decoders."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from httpx_retries import Retry, RetryTransport

from vitadb.config.http import HttpConfig

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

    from httpx._types import HeaderTypes, TimeoutTypes, URLTypes

    from vitadb.config.http import RetryPolicy


class RequestOptions(TypedDict, total=False):
    headers: HeaderTypes | None
    timeout: TimeoutTypes


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=tuple(policy.allowed_methods),
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
        backoff_jitter=policy.backoff_jitter,
    )


class ResilientClient:
    """Thin wrapper over ``httpx.Client`` with a retrying transport.

    ``transport`` replaces the network transport underneath the retry layer; tests
    pass an ``httpx.MockTransport`` here.
    """

    def __init__(
        self,
        config: HttpConfig | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config or HttpConfig()
        retry_transport = RetryTransport(
            transport=transport,
            retry=build_retry(self.config.retry),
        )
        self._client = httpx.Client(
            timeout=self.config.timeout_seconds,
            transport=retry_transport,
            headers={"User-Agent": self.config.user_agent},
            follow_redirects=self.config.follow_redirects,
        )

    def __enter__(self) -> ResilientClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def get(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return self._client.get(url, **kwargs)

    @contextmanager
    def stream(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> Iterator[httpx.Response]:
        """Stream a GET response; the body is only read as far as the caller iterates."""

        with self._client.stream("GET", url, **kwargs) as response:
            yield response
