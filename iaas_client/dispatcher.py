"""Dispatcher - Sends signed requests and returns raw responses.

GET requests carry their parameters in the query string, POST requests in a
form-encoded body. Transient transport failures are retried with backoff
according to the configured RetryPolicy; nothing else is.
"""

from __future__ import annotations

import logging
import time
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from iaas_client.errors import DecodeError, TransportError
from iaas_client.models import Config, RawResponse, RetryPolicy, SignedRequest

logger = logging.getLogger(__name__)

USER_AGENT = "iaas-client"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Failures where the request never reached the server; safe to resend for any call
_NOT_SENT = (httpx.ConnectError, httpx.ConnectTimeout, httpx.PoolTimeout)

# Failures after the request may have been processed; only resent for idempotent calls
_MAYBE_SENT = (
    httpx.ReadTimeout,
    httpx.WriteTimeout,
    httpx.ReadError,
    httpx.WriteError,
    httpx.RemoteProtocolError,
)


class Dispatcher:
    """Issues HTTP requests against the configured API endpoint.

    Usage:
        with Dispatcher(config) as dispatcher:
            raw = dispatcher.send(signed_request)

    The underlying httpx.Client is thread-safe, so one dispatcher can serve
    concurrent callers.
    """

    def __init__(
        self,
        config: Config,
        transport: httpx.BaseTransport | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            config: Endpoint, timeout and TLS settings.
            transport: Optional httpx transport (tests pass httpx.MockTransport).
            retry_policy: Overrides the policy derived from config.
        """
        self._config = config
        self._retry_policy = retry_policy or config.retry_policy
        self._client = httpx.Client(**self._build_client_kwargs(config, transport))

    def __enter__(self) -> "Dispatcher":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    def _build_client_kwargs(
        self, config: Config, transport: httpx.BaseTransport | None
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "base_url": config.endpoint,
            "headers": {"User-Agent": USER_AGENT},
            "timeout": config.connection_timeout,
            "verify": config.verify_ssl,
        }
        if transport is not None:
            kwargs["transport"] = transport
        return kwargs

    def send(
        self,
        signed: SignedRequest,
        idempotent: bool = True,
        timeout: float | None = None,
    ) -> RawResponse:
        """Send a signed request, retrying transient failures.

        Args:
            signed: Output of the signer.
            idempotent: Whether timeouts and gateway errors may be retried.
            timeout: Per-call timeout override in seconds.

        Returns:
            RawResponse for any HTTP status outside the retryable set.

        Raises:
            TransportError: Connection/timeout/gateway failure after retries.
            DecodeError: The body could not be decoded per its Content-Encoding.
        """
        policy = self._retry_policy
        max_attempts = policy.max_retries + 1
        attempt = 0

        while True:
            attempt += 1
            logger.info(
                "Sending request: %s %s%s (attempt %d/%d)",
                signed.method,
                self._config.endpoint,
                signed.path,
                attempt,
                max_attempts,
            )

            try:
                response = self._send_once(signed, timeout)
            except httpx.TransportError as e:
                if attempt < max_attempts and self._is_retryable(e, idempotent):
                    self._backoff(attempt, f"{type(e).__name__}: {e}")
                    continue
                raise TransportError(
                    f"{signed.method} {signed.path} failed after {attempt} attempt(s): "
                    f"{type(e).__name__}: {e}",
                    attempts=attempt,
                ) from e
            except httpx.DecodingError as e:
                raise DecodeError(
                    f"{signed.method} {signed.path} returned an undecodable body: {e}"
                ) from e
            except httpx.RequestError as e:
                raise TransportError(
                    f"{signed.method} {signed.path} failed: {type(e).__name__}: {e}",
                    attempts=attempt,
                ) from e

            if response.status_code in policy.backoff.retry_statuses:
                if idempotent and attempt < max_attempts:
                    self._backoff(attempt, f"HTTP {response.status_code}")
                    continue
                raise TransportError(
                    f"{signed.method} {signed.path} returned HTTP {response.status_code} "
                    f"after {attempt} attempt(s)",
                    attempts=attempt,
                    status_code=response.status_code,
                )

            return response.model_copy(update={"attempts": attempt})

    def _is_retryable(self, error: httpx.TransportError, idempotent: bool) -> bool:
        if isinstance(error, _NOT_SENT):
            return True
        if isinstance(error, _MAYBE_SENT):
            return idempotent
        return False

    def _backoff(self, attempt: int, reason: str) -> None:
        delay = self._retry_policy.delay(attempt)
        logger.warning("Transient failure (%s), retrying in %.2fs", reason, delay)
        time.sleep(delay)

    def _send_once(self, signed: SignedRequest, timeout: float | None) -> RawResponse:
        effective_timeout = timeout if timeout is not None else self._config.connection_timeout

        start_time = time.perf_counter()
        if signed.method == "POST":
            http_response = self._client.request(
                method="POST",
                url=signed.path,
                content=urlencode(signed.params, quote_via=quote).encode("ascii"),
                headers={"Content-Type": FORM_CONTENT_TYPE},
                timeout=effective_timeout,
            )
        else:
            http_response = self._client.request(
                method=signed.method,
                url=signed.path,
                params=signed.params,
                timeout=effective_timeout,
            )
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        return RawResponse(
            status_code=http_response.status_code,
            headers={k.lower(): v for k, v in http_response.headers.items()},
            content=http_response.content,
            elapsed_ms=elapsed_ms,
        )
