"""Pingdom API client.

Thin requests-based client for the two listings the exporter needs: uptime
checks and transaction (TMS) recipes. Every failure mode surfaces as a
ProviderError so the poller has a single exception to recover from.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import requests
from pydantic import BaseModel, ValidationError

from pingdom_exporter.exceptions import ProviderError
from pingdom_exporter.schemas.pingdom_schema import (
    CheckListResponse,
    CheckRecord,
    TransactionListResponse,
    TransactionRecord,
)

logger = logging.getLogger(__name__)


class ChecksProvider(ABC):
    """Source of uptime check records."""

    @abstractmethod
    def list_checks(self) -> list[CheckRecord]:
        """List all checks, tags included.

        Raises:
            ProviderError: If the checks could not be retrieved.
        """
        pass


class TransactionsProvider(ABC):
    """Source of transaction check records."""

    @abstractmethod
    def list_transactions(self) -> list[TransactionRecord]:
        """List all transactions, tags included.

        Raises:
            ProviderError: If the transactions could not be retrieved.
        """
        pass


@dataclass(frozen=True)
class PingdomCredentials:
    """Credentials for the Pingdom API.

    account_email is only set for multi-user accounts.
    """

    username: str
    password: str
    api_key: str
    account_email: str | None = None

    def __repr__(self) -> str:
        return f"PingdomCredentials(username={self.username!r}, multi_user={self.is_multi_user})"

    @property
    def is_multi_user(self) -> bool:
        return self.account_email is not None

    @classmethod
    def from_args(cls, args: list[str]) -> "PingdomCredentials":
        """Build credentials from the positional command line arguments.

        Raises:
            ValueError: If args does not hold 3 or 4 values.
        """
        if len(args) == 3:
            return cls(username=args[0], password=args[1], api_key=args[2])
        if len(args) == 4:
            return cls(
                username=args[0],
                password=args[1],
                api_key=args[2],
                account_email=args[3],
            )
        raise ValueError(f"expected 3 or 4 credential arguments, got {len(args)}")


class PingdomClient(ChecksProvider, TransactionsProvider):
    """Client for the Pingdom REST API."""

    def __init__(
        self,
        credentials: PingdomCredentials,
        base_url: str,
        http_timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        """Initialize PingdomClient.

        Args:
            credentials: Pingdom account credentials
            base_url: API root, e.g. "https://api.pingdom.com/api/2.1"
            http_timeout: Timeout for each HTTP request in seconds
            session: Optional pre-built session (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.http_timeout = http_timeout

        self._session = session if session is not None else requests.Session()
        self._session.auth = (credentials.username, credentials.password)
        self._session.headers["App-Key"] = credentials.api_key
        if credentials.account_email:
            self._session.headers["Account-Email"] = credentials.account_email

        logger.info(
            f"PingdomClient initialized for {self.base_url} "
            f"(multi-user: {credentials.is_multi_user})"
        )

    def list_checks(self) -> list[CheckRecord]:
        payload = self._get("/checks", {"include_tags": "true"})
        response = self._parse(CheckListResponse, payload, "checks")
        return response.checks

    def list_transactions(self) -> list[TransactionRecord]:
        payload = self._get("/tms.recipes", {"include_tags": "true"})
        response = self._parse(TransactionListResponse, payload, "transactions")
        return response.transactions

    def close(self) -> None:
        self._session.close()

    def _get(self, path: str, params: dict[str, str]) -> Any:
        url = f"{self.base_url}{path}"

        try:
            response = self._session.get(url, params=params, timeout=self.http_timeout)
        except requests.RequestException as e:
            raise ProviderError(f"Request to {url} failed: {e}") from e

        if not response.ok:
            raise ProviderError(
                f"Request to {url} returned {response.status_code}: "
                f"{self._error_message(response)}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"Response from {url} is not valid JSON: {e}") from e

    @staticmethod
    def _parse(model: type[BaseModel], payload: Any, what: str) -> Any:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise ProviderError(f"Malformed {what} payload: {e}") from e

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Extract Pingdom's error message, falling back to the reason phrase."""
        try:
            body = response.json()
        except ValueError:
            return response.reason or "no error message"

        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("errormessage"):
                return str(error["errormessage"])

        return response.reason or "no error message"
