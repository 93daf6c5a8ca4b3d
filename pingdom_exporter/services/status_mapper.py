"""Translation of Pingdom status vocabulary into metric values and labels.

Pure functions only. Everything the poller writes into the metrics registry
goes through here, so this is where vocabulary changes on Pingdom's side
show up.
"""

from collections.abc import Iterable
from typing import NamedTuple

from pingdom_exporter.schemas.pingdom_schema import CheckRecord, TransactionRecord

# Exported for any check status outside the known vocabulary. Alert on it.
UNKNOWN_STATUS_VALUE = 100.0

CHECK_STATUS_VALUES: dict[str, float] = {
    "up": 1.0,
    "unknown": 0.0,
    "paused": 0.0,
    "unconfirmed_down": 0.0,
    "down": 0.0,
}

TRANSACTION_SUCCESSFUL = "SUCCESSFUL"


class CheckLabels(NamedTuple):
    """Label values of the pingdom_uptime_* series, in label-name order."""

    name: str
    hostname: str
    resolution: str
    paused: str
    tags: str


class TransactionLabels(NamedTuple):
    """Label values of the pingdom_transaction_status series."""

    name: str
    kitchen: str
    paused: str
    tags: str


def map_check_status(status: str) -> float:
    return CHECK_STATUS_VALUES.get(status, UNKNOWN_STATUS_VALUE)


def is_known_check_status(status: str) -> bool:
    return status in CHECK_STATUS_VALUES


def map_transaction_status(status: str) -> float:
    return 1.0 if status == TRANSACTION_SUCCESSFUL else 0.0


def derive_paused_flag(paused: bool, status: str) -> str:
    """Return the paused label for a check.

    The paused flag Pingdom reports in check listings is unreliable, so a
    "paused" status forces the label to "true" whatever the flag says.
    """
    if status == "paused":
        return "true"
    return "true" if paused else "false"


def derive_transaction_paused_flag(active: str) -> str:
    return "true" if active == "NO" else "false"


def join_tags(tags: Iterable[str]) -> str:
    return ",".join(tags)


def check_labels(check: CheckRecord) -> CheckLabels:
    return CheckLabels(
        name=check.name,
        hostname=check.hostname,
        resolution=str(check.resolution),
        paused=derive_paused_flag(check.paused, check.status),
        tags=join_tags(check.tag_names),
    )


def transaction_labels(transaction: TransactionRecord) -> TransactionLabels:
    return TransactionLabels(
        name=transaction.name,
        kitchen=transaction.kitchen,
        paused=derive_transaction_paused_flag(transaction.active),
        tags=join_tags(transaction.tag_names),
    )
