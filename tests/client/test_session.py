"""
Session manager tests: challenge signing, token storage and failure paths.
"""

import json

import pytest
import requests

from wctl.client.session import SessionManager
from wctl.runtime.errors import DecodeError, HTTPStatusError
from wctl.signers.signer import session_challenge

from conftest import make_response


FIXED_MILLIS = 1700000000000


@pytest.fixture
def sessions(client):
    return SessionManager(client.dispatcher, client.signer, clock=lambda: FIXED_MILLIS)


class TestInit:

    def test_stores_token(self, sessions, http_session):
        http_session.request.return_value = make_response(200, {"token": "abc123"})

        assert not sessions.authenticated
        assert sessions.init() == "abc123"
        assert sessions.token == "abc123"
        assert sessions.authenticated

    def test_posts_signed_credentials(self, sessions, http_session, keypair):
        http_session.request.return_value = make_response(200, {"token": "abc123"})
        sessions.init()

        args, kwargs = http_session.request.call_args
        assert args[0] == "POST"
        assert args[1] == "http://localhost:9000/session/init"

        body = json.loads(kwargs["data"])
        assert body["public_key"] == keypair.public_key_hex()
        assert body["time_millis"] == FIXED_MILLIS
        assert keypair.verify(
            session_challenge(keypair.public_key_hex(), FIXED_MILLIS),
            bytes.fromhex(body["sig"]),
        )

    def test_default_clock_is_whole_seconds(self, client, http_session):
        http_session.request.return_value = make_response(200, {"token": "t"})
        client.init()

        body = json.loads(http_session.request.call_args[1]["data"])
        assert body["time_millis"] % 1000 == 0

    def test_reinit_replaces_token(self, sessions, http_session):
        http_session.request.side_effect = [
            make_response(200, {"token": "first"}),
            make_response(200, {"token": "second"}),
        ]
        sessions.init()
        sessions.init()

        assert sessions.token == "second"

    def test_later_requests_carry_token(self, sessions, http_session):
        http_session.request.return_value = make_response(200, {"token": "abc123"})
        sessions.init()

        http_session.request.return_value = make_response(200, [])
        sessions.dispatcher.request("/tx/list", "GET", out=list)

        headers = http_session.request.call_args[1]["headers"]
        assert headers["X-Session-Token"] == "abc123"


class TestFailures:

    def test_unauthorized_leaves_token_unset(self, sessions, http_session):
        http_session.request.return_value = make_response(401, "bad signature", "Unauthorized")

        with pytest.raises(HTTPStatusError) as exc_info:
            sessions.init()

        assert "401" in str(exc_info.value)
        assert sessions.token == ""
        assert not sessions.authenticated

    def test_failed_reinit_keeps_previous_token(self, sessions, http_session):
        http_session.request.side_effect = [
            make_response(200, {"token": "good"}),
            make_response(403, "expired", "Forbidden"),
        ]
        sessions.init()
        with pytest.raises(HTTPStatusError):
            sessions.init()

        assert sessions.token == "good"

    def test_decode_error(self, sessions, http_session):
        http_session.request.return_value = make_response(200, "not json")
        with pytest.raises(DecodeError):
            sessions.init()
        assert sessions.token == ""

    @pytest.mark.parametrize("body", [{}, {"token": ""}, {"token": 7}])
    def test_missing_token_is_not_success(self, sessions, http_session, body):
        http_session.request.side_effect = [
            make_response(200, {"token": "good"}),
            make_response(200, body),
        ]
        sessions.init()

        with pytest.raises(DecodeError):
            sessions.init()

        assert sessions.token == "good"
        assert sessions.authenticated

    def test_transport_error(self, sessions, http_session):
        http_session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(requests.ConnectionError):
            sessions.init()
        assert sessions.token == ""
        assert http_session.request.call_count == 1
