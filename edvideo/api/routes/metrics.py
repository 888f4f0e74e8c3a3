"""
Prometheus metrics endpoint.

This is a stub. It emits a valid exposition through prometheus_client, but
the counter values are random per request and carry no meaning; no request
counting is wired in. Each request builds its own registry, so nothing is
shared or mutated across requests.
"""

import random

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest
from prometheus_client.core import CounterMetricFamily

router = APIRouter()

# (method, handler, exclusive upper bound of the placeholder value)
REQUEST_COUNTERS = [
    ("get", "/", 1000),
    ("get", "/videos", 500),
    ("post", "/upload", 100),
]


class PlaceholderRequestCollector:
    """Yields http_requests_total with a random value per route."""

    def collect(self):
        family = CounterMetricFamily(
            "http_requests",
            "Total HTTP requests",
            labels=["method", "handler"],
        )
        for method, handler, upper in REQUEST_COUNTERS:
            family.add_metric([method, handler], random.randrange(upper))
        yield family


def render_metrics() -> bytes:
    registry = CollectorRegistry(auto_describe=False)
    registry.register(PlaceholderRequestCollector())
    return generate_latest(registry)


@router.get("", summary="Placeholder request counters")
async def metrics() -> Response:
    return Response(content=render_metrics(), media_type=CONTENT_TYPE_LATEST)
