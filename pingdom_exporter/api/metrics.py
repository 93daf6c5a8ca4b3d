"""Metrics API endpoint for Prometheus scraping."""

from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, Response

from pingdom_exporter.services.metrics_service import MetricsService

metrics_bp = Blueprint("metrics", __name__, url_prefix="/metrics")


@metrics_bp.route("", methods=["GET"])
@inject
def get_metrics(
    metrics_service: MetricsService = Provide["metrics_service"],
) -> Any:
    """Return metrics in Prometheus text format.

    Renders whatever the registry holds at request time; never waits on
    the poller.

    Returns:
        Response with metrics data in Prometheus exposition format
    """
    metrics_text = metrics_service.render()

    return Response(
        metrics_text,
        content_type=metrics_service.content_type,
    )
