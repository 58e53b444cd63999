"""
Signed request dispatch.

Performs one HTTP exchange against the node with the session token and user
agent attached, and decodes the response. There is no retry here; callers own
retry policy.
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from pydantic import BaseModel, ValidationError

from ..codec.wire import parse_json
from ..config import ClientConfig
from ..routes import HEADER_CONTENT_TYPE, HEADER_SESSION_TOKEN, HEADER_USER_AGENT
from ..runtime.errors import DecodeError, EncodeError, HTTPStatusError

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


@dataclass
class RequestOptions:
    """Per-request body options."""

    content_type: Optional[str] = None
    send_raw_bytes: bool = False


def encode_body(body: Any) -> str:
    """
    JSON-encode a request body.

    Wire codec types encode themselves, pydantic models are dumped by alias
    and anything else goes through ``json``.
    """
    to_json = getattr(body, "to_json", None)
    if callable(to_json):
        return to_json()
    if isinstance(body, BaseModel):
        return body.model_dump_json(by_alias=True)
    try:
        return json.dumps(body)
    except (TypeError, ValueError) as e:
        raise EncodeError(f"Cannot encode request body of type {type(body).__name__}", cause=e) from e


def decode_into(out: Any, content: bytes) -> Any:
    """
    Decode a successful response body according to ``out``.

    Args:
        out: ``None`` to skip decoding; an instance with ``unmarshal_json``
            to fill in place; a pydantic model class; a class with a
            ``from_json`` constructor; or ``dict``/``list`` for plain JSON.
        content: Raw response body

    Returns:
        The decoded value (the ``out`` instance itself when filled in place)
    """
    if out is None:
        return None

    if not isinstance(out, type):
        unmarshal = getattr(out, "unmarshal_json", None)
        if not callable(unmarshal):
            raise TypeError(f"Cannot decode into {out!r}")
        unmarshal(content)
        return out

    if issubclass(out, BaseModel):
        try:
            return out.model_validate_json(content)
        except ValidationError as e:
            raise DecodeError(f"Invalid {out.__name__} response", cause=e) from e

    from_json = getattr(out, "from_json", None)
    if callable(from_json):
        return from_json(content)

    if out in (dict, list):
        value = parse_json(content)
        if not isinstance(value, out):
            raise DecodeError(f"Expected JSON {out.__name__}, got {type(value).__name__}")
        return value

    raise TypeError(f"Cannot decode into {out.__name__}")


class RequestDispatcher:
    """
    Sends requests to the node over one pooled HTTP session.

    The session token is attached to every request as-is, including the
    empty token before a session has been initialized; the node rejects
    such calls and the client does not pre-validate.
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        """
        Initialize the dispatcher.

        Args:
            config: Client configuration
            session: Optional requests.Session to share; one is created and
                owned by the dispatcher otherwise
        """
        self.config = config
        self.session_token = ""
        self._session = session or requests.Session()
        self._owns_session = session is None

    def headers(self) -> Dict[str, str]:
        """Headers attached to every HTTP request and WebSocket handshake."""
        return {
            HEADER_SESSION_TOKEN: self.session_token,
            HEADER_USER_AGENT: self.config.build_info.user_agent(),
        }

    def request(self, path: str, method: str = "POST", body: Any = None,
                out: Any = None, options: Optional[RequestOptions] = None) -> Any:
        """
        Make a request to a route path and decode the result.

        Args:
            path: Route path, optionally with a query string
            method: HTTP method
            body: Request body; JSON-encoded unless ``options.send_raw_bytes``
            out: Decode target, see ``decode_into``
            options: Content type and raw-bytes mode

        Returns:
            The decoded response, or None when ``out`` is None

        Raises:
            HTTPStatusError: On a status outside [200, 300)
            DecodeError: If the response body cannot be decoded
            requests.RequestException: On transport failure, unmodified
        """
        url = self.config.http_url(path)
        headers = self.headers()

        if options is not None and options.content_type:
            headers[HEADER_CONTENT_TYPE] = options.content_type

        data = None
        if body is not None:
            if options is not None and options.send_raw_bytes:
                if not isinstance(body, (bytes, bytearray)):
                    raise TypeError("raw-bytes requests need a bytes body")
                data = bytes(body)
            else:
                data = encode_body(body).encode("utf-8")
                headers.setdefault(HEADER_CONTENT_TYPE, JSON_CONTENT_TYPE)

        logger.debug(f"{method} {url} ({len(data) if data else 0} bytes)")

        response = self._session.request(
            method,
            url,
            data=data,
            headers=headers,
            timeout=self.config.timeout,
        )

        logger.debug(f"{method} {url} -> {response.status_code}")

        if not 200 <= response.status_code < 300:
            raise HTTPStatusError(
                response.status_code,
                f"{response.status_code} {response.reason}",
                response.text,
            )

        return decode_into(out, response.content)

    def close(self) -> None:
        """Close the HTTP session if owned by this dispatcher."""
        if self._owns_session:
            self._session.close()
