"""Root endpoint used as a liveness probe for the exporter process."""

from typing import Any

from flask import Blueprint, Response

root_bp = Blueprint("root", __name__)


@root_bp.route("/", methods=["GET"])
def index() -> Any:
    """Return an empty 200 response.

    This only says the HTTP server is up. Whether Pingdom is reachable is
    reported by the pingdom_up gauge instead.
    """
    return Response("", status=200, content_type="text/plain; charset=utf-8")
