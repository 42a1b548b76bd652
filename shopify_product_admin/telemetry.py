"""Logging setup and OpenTelemetry helpers for workflow metrics."""

import logging

from opentelemetry import metrics
from opentelemetry.metrics import Histogram
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import ConsoleMetricExporter, PeriodicExportingMetricReader

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_meter_provider_initialized = False


def configure_logging(level: str = "INFO") -> None:
    """Send package logs to stderr at the given level."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("shopify_product_admin").setLevel(level.upper())


def init_metrics() -> None:
    """Initialize OpenTelemetry metrics with a console exporter."""
    global _meter_provider_initialized
    if _meter_provider_initialized:
        return
    reader = PeriodicExportingMetricReader(ConsoleMetricExporter())
    provider = MeterProvider(metric_readers=[reader])
    metrics.set_meter_provider(provider)
    _meter_provider_initialized = True


def get_step_duration_histogram() -> Histogram:
    """Return a histogram for upsert step durations.

    Without a configured meter provider the OpenTelemetry API hands out a
    no-op instrument, so recording is always safe.
    """
    meter = metrics.get_meter("shopify_product_admin")
    return meter.create_histogram(
        name="product_admin.step.duration",
        unit="ms",
        description="Duration of product upsert workflow steps",
    )
