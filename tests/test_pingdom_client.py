"""Tests for the Pingdom API client."""

from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import requests

from pingdom_exporter.exceptions import ProviderError
from pingdom_exporter.services.pingdom_client import PingdomClient, PingdomCredentials

BASE_URL = "https://pingdom.invalid/api/2.1"

CHECKS_PAYLOAD = {
    "checks": [
        {
            "id": 85975,
            "created": 1297446423,
            "name": "homepage",
            "hostname": "example.com",
            "resolution": 1,
            "type": "http",
            "lasterrortime": 1297446423,
            "lasttesttime": 1300977363,
            "lastresponsetime": 234,
            "status": "up",
            "tags": [
                {"name": "prod", "type": "u", "count": 2},
                {"name": "web", "type": "a", "count": 1},
            ],
        },
        {
            "id": 161748,
            "name": "api",
            "hostname": "api.example.com",
            "resolution": 5,
            "lastresponsetime": 0,
            "status": "paused",
        },
    ]
}

RECIPES_PAYLOAD = {
    "recipes": {
        "100": {
            "name": "checkout",
            "kitchen": "us-east",
            "active": "YES",
            "status": "SUCCESSFUL",
            "tags": [{"name": "shop"}],
        },
        "101": {
            "name": "login",
            "kitchen": "eu-west",
            "active": "NO",
            "status": "FAILING",
        },
    }
}


def _response(status_code: int = 200, payload: Any = None, reason: str = "OK") -> MagicMock:
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = reason
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


def _client(credentials: PingdomCredentials | None = None) -> tuple[PingdomClient, requests.Session]:
    session = requests.Session()
    credentials = credentials or PingdomCredentials("user@example.com", "secret", "app-key")
    client = PingdomClient(credentials, base_url=BASE_URL + "/", http_timeout=3.0, session=session)
    return client, session


class TestPingdomCredentials:
    """Credential parsing from positional arguments."""

    def test_single_user(self):
        credentials = PingdomCredentials.from_args(["user", "pass", "key"])

        assert credentials.username == "user"
        assert credentials.api_key == "key"
        assert credentials.is_multi_user is False

    def test_multi_user(self):
        credentials = PingdomCredentials.from_args(["user", "pass", "key", "owner@example.com"])

        assert credentials.account_email == "owner@example.com"
        assert credentials.is_multi_user is True

    @pytest.mark.parametrize("args", [[], ["user"], ["user", "pass"], ["a", "b", "c", "d", "e"]])
    def test_wrong_arity(self, args: list[str]):
        with pytest.raises(ValueError):
            PingdomCredentials.from_args(args)

    def test_repr_hides_secrets(self):
        credentials = PingdomCredentials("user", "hunter2", "app-key")

        assert "hunter2" not in repr(credentials)
        assert "app-key" not in repr(credentials)


class TestPingdomClient:
    """HTTP behaviour of the client."""

    def test_session_authentication(self):
        _, session = _client()

        assert session.auth == ("user@example.com", "secret")
        assert session.headers["App-Key"] == "app-key"
        assert "Account-Email" not in session.headers

    def test_multi_user_header(self):
        credentials = PingdomCredentials("user", "pass", "key", "owner@example.com")
        _, session = _client(credentials)

        assert session.headers["Account-Email"] == "owner@example.com"

    def test_list_checks(self):
        client, session = _client()

        with patch.object(session, "get", return_value=_response(payload=CHECKS_PAYLOAD)) as mock_get:
            checks = client.list_checks()

        mock_get.assert_called_once_with(
            f"{BASE_URL}/checks",
            params={"include_tags": "true"},
            timeout=3.0,
        )
        assert [check.name for check in checks] == ["homepage", "api"]
        assert checks[0].last_response_time == 234
        assert checks[0].tag_names == ["prod", "web"]
        assert checks[1].tag_names == []
        assert checks[1].paused is False

    def test_list_transactions_keyed_by_id(self):
        client, session = _client()

        with patch.object(session, "get", return_value=_response(payload=RECIPES_PAYLOAD)) as mock_get:
            transactions = client.list_transactions()

        assert mock_get.call_args.args[0] == f"{BASE_URL}/tms.recipes"
        assert {t.name for t in transactions} == {"checkout", "login"}
        login = next(t for t in transactions if t.name == "login")
        assert login.active == "NO"
        assert login.kitchen == "eu-west"

    def test_list_transactions_as_list(self):
        client, session = _client()
        payload = {"recipes": list(RECIPES_PAYLOAD["recipes"].values())}

        with patch.object(session, "get", return_value=_response(payload=payload)):
            transactions = client.list_transactions()

        assert len(transactions) == 2

    def test_http_error_includes_pingdom_message(self):
        client, session = _client()
        error_body = {
            "error": {
                "statuscode": 403,
                "statusdesc": "Forbidden",
                "errormessage": "Invalid application key",
            }
        }

        with patch.object(
            session, "get", return_value=_response(403, error_body, reason="Forbidden")
        ):
            with pytest.raises(ProviderError) as exc_info:
                client.list_checks()

        assert exc_info.value.status_code == 403
        assert "Invalid application key" in exc_info.value.message

    def test_http_error_without_json_body(self):
        client, session = _client()
        response = _response(502, ValueError("no json"), reason="Bad Gateway")

        with patch.object(session, "get", return_value=response):
            with pytest.raises(ProviderError) as exc_info:
                client.list_transactions()

        assert exc_info.value.status_code == 502
        assert "Bad Gateway" in exc_info.value.message

    def test_transport_error(self):
        client, session = _client()

        with patch.object(session, "get", side_effect=requests.ConnectionError("refused")):
            with pytest.raises(ProviderError) as exc_info:
                client.list_checks()

        assert exc_info.value.status_code is None
        assert "refused" in str(exc_info.value)

    def test_timeout(self):
        client, session = _client()

        with patch.object(session, "get", side_effect=requests.Timeout("read timed out")):
            with pytest.raises(ProviderError):
                client.list_checks()

    def test_invalid_json(self):
        client, session = _client()

        with patch.object(session, "get", return_value=_response(payload=ValueError("bad"))):
            with pytest.raises(ProviderError, match="not valid JSON"):
                client.list_checks()

    def test_malformed_payload(self):
        client, session = _client()
        payload = {"checks": [{"hostname": "example.com"}]}

        with patch.object(session, "get", return_value=_response(payload=payload)):
            with pytest.raises(ProviderError, match="Malformed checks payload"):
                client.list_checks()
