"""
Session token lifecycle.

A client starts unauthenticated. ``init`` signs a timestamped challenge,
exchanges it for a session token and stores the token on the dispatcher,
from where it is attached to every request and WebSocket handshake.
"""

from __future__ import annotations
import logging
import time
from typing import Callable

from ..models import Credentials, SessionResponse
from ..routes import ROUTE_SESSION_INIT
from ..runtime.errors import DecodeError
from ..signers.signer import Signer
from .dispatcher import RequestDispatcher

logger = logging.getLogger(__name__)


def _now_millis() -> int:
    # Second precision, scaled to milliseconds.
    return int(time.time()) * 1000


class SessionManager:
    """
    Obtains and holds the session token.

    Re-initializing replaces the token wholesale. There is no internal lock:
    callers that re-initialize while other requests are in flight must
    serialize that themselves.
    """

    def __init__(self, dispatcher: RequestDispatcher, signer: Signer,
                 clock: Callable[[], int] = _now_millis):
        self.dispatcher = dispatcher
        self.signer = signer
        self._clock = clock

    @property
    def token(self) -> str:
        return self.dispatcher.session_token

    @property
    def authenticated(self) -> bool:
        return bool(self.dispatcher.session_token)

    def credentials(self) -> Credentials:
        """Build fresh signed credentials for a session-init call."""
        millis = self._clock()
        return Credentials(
            public_key=self.signer.public_key_hex,
            time_millis=millis,
            sig=self.signer.sign_session(millis).hex(),
        )

    def init(self) -> str:
        """
        Establish a session and store its token.

        Returns:
            The new session token

        Raises:
            HTTPStatusError: If the node rejects the credentials
            DecodeError: If the response cannot be decoded or carries no token
            requests.RequestException: On transport failure

        The stored token is left untouched when any of these are raised.
        """
        creds = self.credentials()
        resp = self.dispatcher.request(ROUTE_SESSION_INIT, "POST", creds, SessionResponse)

        if not resp.token:
            raise DecodeError("Session response carries no token")

        self.dispatcher.session_token = resp.token
        logger.info(f"Session established for {creds.public_key}")
        return resp.token
