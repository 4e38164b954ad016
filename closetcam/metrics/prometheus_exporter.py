"""Prometheus exporter helpers."""

from __future__ import annotations

from prometheus_client import Counter


color_classifications_total = Counter(
    "color_classifications_total",
    "Number of sampled colours classified, by outcome.",
    ["outcome"],
)

photos_saved_total = Counter(
    "photos_saved_total",
    "Number of photos written to the library, by kind.",
    ["kind"],
)

description_requests_total = Counter(
    "description_requests_total",
    "Number of generated description requests, by outcome.",
    ["outcome"],
)
