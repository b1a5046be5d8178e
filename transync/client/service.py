"""
Translation Client Module

Request/response boundary to the external translation service:
- One outbound request per call, no retries
- Caller-supplied deadline, enforced by cancelling the request
- Shared cancellation token so a bulk cancel also aborts the in-flight call
- Failure classification into the ErrorKind taxonomy

For the wire format, see client/payload.py
"""

import asyncio
from typing import Optional

import httpx

from transync.config import SUPPORTED_FORMATS, ClientSettings
from transync.logger import get_logger
from transync import language_codes as lc
from transync.client.cancellation import CancellationToken
from transync.client.exceptions import (
    HTTPError,
    MalformedResponse,
    NetworkError,
    RequestTimeout,
    TranslationCancelled,
)
from transync.client.payload import (
    TranslationResult,
    build_headers,
    build_request_body,
    extract_error_detail,
    get_httpx_timeout,
    parse_translation_payload,
)

logger = get_logger(__name__)


class TranslationClient:
    """Async client for the translation service."""

    def __init__(self, settings: ClientSettings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None
        # Number of requests actually sent, cache hits never touch this
        self.request_count = 0
        logger.info(f"Initialized translation client for {settings.api_url} (timeout: {settings.timeout_ms}ms)")

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(
                transport=self._transport,
                timeout=get_httpx_timeout(self.settings.timeout_ms),
            )
        return self._http

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def translate(
        self,
        content: str,
        target_language: str,
        fmt: str = "html",
        token: Optional[CancellationToken] = None,
        timeout_ms: Optional[int] = None,
    ) -> TranslationResult:
        """
        Translate one piece of content.

        Args:
            content: Non-empty text or HTML to translate
            target_language: Two-letter target language code
            fmt: "html" for body content, "text" for titles
            token: Optional shared cancellation token
            timeout_ms: Deadline override, defaults to the configured timeout

        Returns:
            TranslationResult tagged with the target language

        Raises:
            ValueError: On empty content, unknown format or unknown language
            TranslationError: Subclass describing why the request failed
            TranslationCancelled: If the token fired before the response arrived
        """
        if not isinstance(content, str) or not content.strip():
            raise ValueError("Content to translate must be a non-empty string")
        if fmt not in SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported format {fmt!r}, expected one of {SUPPORTED_FORMATS}")
        if not lc.is_valid_language_code(target_language):
            raise ValueError(f"Unsupported target language: {target_language!r}")

        if token is not None and token.cancelled:
            raise TranslationCancelled("Cancelled before request was sent")

        deadline_ms = timeout_ms if timeout_ms is not None else self.settings.timeout_ms

        request_task = asyncio.ensure_future(self._send(content, target_language, fmt))
        waiters = {request_task}
        cancel_task = None
        if token is not None:
            cancel_task = asyncio.ensure_future(token.wait())
            waiters.add(cancel_task)

        try:
            done, _ = await asyncio.wait(
                waiters,
                timeout=deadline_ms / 1000.0,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            if cancel_task is not None:
                cancel_task.cancel()
            if not request_task.done():
                request_task.cancel()
                await asyncio.gather(request_task, return_exceptions=True)

        if request_task in done:
            # A finished response wins over a simultaneous cancel
            return request_task.result()

        if cancel_task is not None and cancel_task in done:
            logger.debug("In-flight translation request aborted by cancellation")
            raise TranslationCancelled("Request aborted by cancellation")

        logger.warning(f"Translation request exceeded {deadline_ms}ms deadline")
        raise RequestTimeout(
            f"Translation request timed out after {deadline_ms}ms",
            code="timeout",
            details={"timeout_ms": deadline_ms},
        )

    async def _send(self, content: str, target_language: str, fmt: str) -> TranslationResult:
        body = build_request_body(content, target_language, fmt)
        headers = build_headers(self.settings.api_key)

        logger.debug(f"Requesting {fmt} translation to {target_language} ({len(content)} chars)")
        self.request_count += 1

        try:
            response = await self._client().post(self.settings.api_url, json=body, headers=headers)
        except httpx.TimeoutException as e:
            raise RequestTimeout(f"Translation service request timeout: {e}", code="timeout")
        except httpx.HTTPError as e:
            logger.error(f"Translation service transport error: {e}")
            raise NetworkError(f"Translation service unreachable: {e}", code="network_error")

        if not response.is_success:
            detail = extract_error_detail(response)
            logger.error(f"Translation service HTTP error: {response.status_code} - {detail['message']}")
            raise HTTPError(
                response.status_code,
                f"Translation service error ({response.status_code}): {detail['message']}",
                code=detail["code"],
                details={"status_code": response.status_code},
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponse(f"Response body is not valid JSON: {e}", code="malformed_response")

        result = parse_translation_payload(payload, target_language)
        logger.debug(f"Received {len(result.translated_content)} chars in {target_language}")
        return result
