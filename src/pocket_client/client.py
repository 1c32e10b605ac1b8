"""Pocket v3 API client.

Implements the three-legged authorization flow and adding bookmarks:

    1. get_request_token()      POST /v3/oauth/request
    2. get_authorization_url()  send the user's browser here to approve
    3. get_access_token()       POST /v3/oauth/authorize
    4. add()                    POST /v3/add

Requests are JSON, but Pocket answers these endpoints with
application/x-www-form-urlencoded bodies, so successful responses are decoded
as query strings. Error details come back in the X-Error header, not the body.
"""

import json
import logging
import re
import time
from urllib.parse import parse_qs

import httpx

from .constants import DEFAULT_TIMEOUT
from .errors import ErrorKind, PocketError, validation_error
from .models import (
    AccessTokenRequest,
    AddInput,
    AuthorizeResponse,
    RequestTokenRequest,
    first_value,
)

logger = logging.getLogger(__name__)

HOST = "https://getpocket.com/v3"

AUTHORIZE_URL = (
    "https://getpocket.com/auth/authorize?request_token={token}&redirect_uri={url}"
)

ENDPOINT_REQUEST_TOKEN = "/oauth/request"
ENDPOINT_AUTHORIZE = "/oauth/authorize"
ENDPOINT_ADD = "/add"

X_ERROR_HEADER = "X-Error"
X_ERROR_CODE_HEADER = "X-Error-Code"

BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class PocketClient:
    """Client for the Pocket v3 API, bound to one application consumer key.

    The client holds no mutable state after construction, so one instance can
    be shared between threads.
    """

    def __init__(
        self,
        consumer_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        if not consumer_key:
            raise validation_error("consumer key is empty")

        self._consumer_key = consumer_key
        self._timeout = timeout
        self._client = httpx.Client(
            headers={"Content-Type": "application/json; charset=UTF8"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def consumer_key(self) -> str:
        return self._consumer_key

    @property
    def timeout(self) -> float:
        return self._timeout

    def get_request_token(
        self, redirect_uri: str, *, timeout: float | None = None
    ) -> str:
        """Obtain a request token, the first step of the authorization flow.

        Args:
            redirect_uri: Where Pocket sends the user after they approve.
            timeout: Optional deadline in seconds for this call. Never
                exceeds the client's own timeout.

        Raises:
            PocketError: On empty input, network failure, a non-200 status,
                or a response without a ``code`` field.
        """
        if not redirect_uri:
            raise validation_error("redirect URI is empty")

        request = RequestTokenRequest(
            consumer_key=self._consumer_key, redirectUri=redirect_uri
        )
        values = self._post(
            ENDPOINT_REQUEST_TOKEN, request.to_payload(), timeout=timeout
        )

        request_token = first_value(values, "code")
        if not request_token:
            raise PocketError(
                ErrorKind.DECODING, "empty request token in API response"
            )

        logger.info("Obtained request token")
        return request_token

    def get_authorization_url(self, request_token: str, redirect_url: str) -> str:
        """Build the URL the end user visits to approve the application.

        Pure formatting, no request is made. Both values are inserted as-is.
        """
        if not request_token:
            raise validation_error("request token is empty")
        if not redirect_url:
            raise validation_error("redirect URL is empty")

        return AUTHORIZE_URL.format(token=request_token, url=redirect_url)

    def authorize(
        self, request_token: str, *, timeout: float | None = None
    ) -> AuthorizeResponse:
        """Exchange an approved request token for an access token and username."""
        if not request_token:
            raise validation_error("request token is empty")

        request = AccessTokenRequest(
            consumer_key=self._consumer_key, code=request_token
        )
        values = self._post(ENDPOINT_AUTHORIZE, request.to_payload(), timeout=timeout)

        response = AuthorizeResponse.from_values(values)
        if not response.access_token:
            raise PocketError(
                ErrorKind.DECODING, "empty access token in API response"
            )

        logger.info("Authorized Pocket user %s", response.username or "<unknown>")
        return response

    def get_access_token(
        self, request_token: str, *, timeout: float | None = None
    ) -> str:
        """Exchange an approved request token for a long-lived access token."""
        return self.authorize(request_token, timeout=timeout).access_token

    def add(self, item: AddInput, *, timeout: float | None = None) -> None:
        """Save a bookmark to the user's Pocket list.

        Any 200 response counts as success; its body is not inspected.
        """
        item.validate()

        request = item.to_request(self._consumer_key)
        self._post(ENDPOINT_ADD, request.to_payload(), timeout=timeout, decode=False)
        logger.info("Added %s", item.url)

    def _post(
        self,
        endpoint: str,
        payload: dict,
        *,
        timeout: float | None = None,
        decode: bool = True,
    ) -> dict[str, list[str]]:
        """POST a JSON payload and decode the form-encoded response body.

        httpx applies ``timeout`` to each connect/read/write step. The whole
        exchange is additionally held to a deadline of ``timeout`` seconds,
        checked once the headers arrive and after every body chunk.
        """
        try:
            body = json.dumps(payload)
        except (TypeError, ValueError) as e:
            raise PocketError(ErrorKind.ENCODING, "failed to encode request body") from e

        effective_timeout = self._timeout
        if timeout is not None:
            effective_timeout = min(timeout, self._timeout)
        deadline = time.monotonic() + effective_timeout

        url = HOST + endpoint
        logger.debug("POST %s", url)

        try:
            with self._client.stream(
                "POST", url, content=body.encode("utf-8"), timeout=effective_timeout
            ) as response:
                _check_deadline(deadline, effective_timeout, endpoint)

                if response.status_code != 200:
                    x_error = response.headers.get(X_ERROR_HEADER, "")
                    logger.warning(
                        "Pocket returned %d for %s: %s",
                        response.status_code,
                        endpoint,
                        x_error,
                    )
                    raise PocketError(
                        ErrorKind.REMOTE_API,
                        f"API error: {x_error}",
                        status_code=response.status_code,
                        error_code=response.headers.get(X_ERROR_CODE_HEADER),
                    )

                if not decode:
                    return {}

                raw = bytearray()
                for chunk in response.iter_bytes():
                    raw.extend(chunk)
                    _check_deadline(deadline, effective_timeout, endpoint)
                encoding = response.encoding or "utf-8"
        except httpx.RequestError as e:
            logger.warning("Request to %s failed: %s", endpoint, e)
            raise PocketError(ErrorKind.TRANSPORT, "failed to send HTTP request") from e

        return parse_form(bytes(raw), encoding)

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def _check_deadline(deadline: float, timeout: float, endpoint: str) -> None:
    if time.monotonic() > deadline:
        logger.warning("Request to %s exceeded %gs", endpoint, timeout)
        raise PocketError(
            ErrorKind.TRANSPORT, f"request exceeded {timeout:g}s deadline"
        )


def parse_form(raw: bytes, encoding: str = "utf-8") -> dict[str, list[str]]:
    """Parse an application/x-www-form-urlencoded body.

    Stricter than ``parse_qs``: a ``%`` not followed by two hex digits, a
    ``;`` separator, or an escape that is not valid text is rejected.
    """
    try:
        text = raw.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise PocketError(ErrorKind.DECODING, "failed to parse response values") from e

    if BAD_ESCAPE.search(text):
        raise PocketError(ErrorKind.DECODING, "invalid percent-escape in response")
    if ";" in text:
        raise PocketError(ErrorKind.DECODING, "invalid semicolon separator in response")

    try:
        return parse_qs(text, keep_blank_values=True, errors="strict")
    except ValueError as e:
        raise PocketError(ErrorKind.DECODING, "failed to parse response values") from e
