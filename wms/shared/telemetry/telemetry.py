"""OpenTelemetry tracing for the WMS API"""

import logging

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import \
    OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (BatchSpanProcessor,
                                            ConsoleSpanExporter, SpanExporter)
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from sqlalchemy.ext.asyncio import AsyncEngine

from wms.infrastructure.config.settings import Settings
from wms.shared.context import RequestContext

logger = logging.getLogger(__name__)

# Probes and docs are not worth a span
EXCLUDED_URLS = "/health,/docs,/redoc,/openapi.json"


def build_exporter(exporter_type: str, otlp_endpoint: str | None) -> SpanExporter | None:
    """Span exporter for the configured type; None means spans are sampled but dropped"""
    if exporter_type == "none":
        return None
    if exporter_type == "otlp":
        if not otlp_endpoint:
            raise ValueError("TELEMETRY_OTLP_ENDPOINT is required for the otlp exporter")
        # TLS unless the collector is addressed over plain http
        return OTLPSpanExporter(endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://"))
    if exporter_type != "console":
        logger.warning("Unknown telemetry exporter '%s', falling back to console", exporter_type)
    return ConsoleSpanExporter()


class Tracing:
    """
    Tracer provider plus the instrumentations the API relies on.

    Built once in the application lifespan from ``Settings``; ``shutdown``
    flushes pending spans.
    """

    def __init__(self, provider: TracerProvider, exporter_type: str):
        self.provider = provider
        self.exporter_type = exporter_type

    @classmethod
    def from_settings(cls, settings: Settings) -> "Tracing":
        resource = Resource(
            attributes={
                SERVICE_NAME: settings.app_name,
                SERVICE_VERSION: settings.app_version,
                "deployment.environment": settings.environment,
            }
        )
        provider = TracerProvider(
            resource=resource,
            sampler=ParentBased(TraceIdRatioBased(settings.telemetry_sample_rate)),
        )
        exporter = build_exporter(settings.telemetry_exporter, settings.telemetry_otlp_endpoint)
        if exporter is not None:
            provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)
        return cls(provider, settings.telemetry_exporter)

    def instrument(self, app: FastAPI, engine: AsyncEngine, redis: bool = False) -> None:
        FastAPIInstrumentor.instrument_app(
            app, tracer_provider=self.provider, excluded_urls=EXCLUDED_URLS
        )
        SQLAlchemyInstrumentor().instrument(
            engine=engine.sync_engine, tracer_provider=self.provider
        )
        if redis:
            RedisInstrumentor().instrument(tracer_provider=self.provider)
        # Records get otelTraceID / otelSpanID; the log format stays ours
        LoggingInstrumentor().instrument(tracer_provider=self.provider, set_logging_format=False)
        logger.info("Tracing enabled: exporter=%s", self.exporter_type)

    def shutdown(self) -> None:
        try:
            self.provider.shutdown()
        except Exception as e:
            logger.error("Error flushing spans on shutdown: %s", e)


_tracing: Tracing | None = None


def get_tracing() -> Tracing | None:
    return _tracing


def set_tracing(tracing: Tracing | None) -> None:
    global _tracing
    _tracing = tracing


def annotate_span(context: RequestContext) -> None:
    """Tag the active request span with the caller; a no-op when tracing is off"""
    span = trace.get_current_span()
    if not span.is_recording():
        return
    if context.user_id:
        span.set_attribute("enduser.id", context.user_id)
    if context.tenant_id:
        span.set_attribute("wms.tenant_id", context.tenant_id)
