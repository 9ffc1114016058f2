# user_service/shared/observability.py
import structlog
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from user_service.shared.config import settings

logger = structlog.get_logger()

_provider_installed = False

def setup_observability(app: FastAPI):
    """
    Configures OpenTelemetry for the application.

    1. Sets the Global Tracer Provider (once per process).
    2. Exports spans over OTLP/HTTP when OTEL_EXPORTER_OTLP_ENDPOINT is set,
       and to the console in DEBUG mode.
    3. Auto-instruments the FastAPI application to trace all HTTP requests.
    """
    global _provider_installed

    if not _provider_installed:
        resource = Resource.create(attributes={
            "service.name": settings.OTEL_SERVICE_NAME,
            "service.version": settings.APP_VERSION,
            "deployment.environment": settings.APP_ENV.value,
        })
        provider = TracerProvider(resource=resource)

        if settings.OTEL_EXPORTER_OTLP_ENDPOINT:
            endpoint = f"{settings.OTEL_EXPORTER_OTLP_ENDPOINT.rstrip('/')}/v1/traces"
            provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
            logger.info("telemetry_enabled", endpoint=endpoint)

        if settings.DEBUG:
            provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

        trace.set_tracer_provider(provider)
        _provider_installed = True

    FastAPIInstrumentor.instrument_app(app, tracer_provider=trace.get_tracer_provider())

def get_tracer(name: str):
    """
    Utility to get a tracer for manual instrumentation in Use Cases.
    Usage:
        tracer = get_tracer(__name__)
        with tracer.start_as_current_span("my_custom_logic"):
            ...
    """
    return trace.get_tracer(name)
