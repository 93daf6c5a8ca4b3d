"""Exporter exceptions."""


class ConfigurationError(Exception):
    """Raised when exporter configuration is invalid.

    Only ever raised during startup; the process cannot proceed.
    """

    pass


class ProviderError(Exception):
    """Raised when a call to the Pingdom API fails.

    Covers transport errors, non-2xx responses and payloads that cannot be
    decoded or validated. Recovered per poll tick by flipping pingdom_up to 0.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)
