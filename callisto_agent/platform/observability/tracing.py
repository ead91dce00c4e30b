"""OpenTelemetry tracing setup.

Spans are always created through the OpenTelemetry API; they are only
exported when tracing is enabled, in which case an OTLP exporter is installed
and LangChain runs are instrumented through OpenInference.
"""

import logging

from openinference.instrumentation.langchain import LangChainInstrumentor
from openinference.semconv.resource import ResourceAttributes
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME as RESOURCE_SERVICE_NAME
from opentelemetry.sdk.resources import SERVICE_VERSION as RESOURCE_SERVICE_VERSION
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from callisto_agent.platform.constants import SERVICE_NAME, SERVICE_VERSION

logger = logging.getLogger(__name__)


def configure_tracing(host: str, port: int) -> TracerProvider:
    """Install a global tracer provider exporting spans over OTLP/gRPC.

    Args:
        host: Collector host
        port: Collector OTLP gRPC port

    Returns:
        The installed tracer provider, to be shut down on exit
    """
    resource = Resource.create(
        {
            RESOURCE_SERVICE_NAME: SERVICE_NAME,
            RESOURCE_SERVICE_VERSION: SERVICE_VERSION,
            ResourceAttributes.PROJECT_NAME: SERVICE_NAME,
        }
    )
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{host}:{port}", insecure=True))
    )
    trace.set_tracer_provider(provider)

    LangChainInstrumentor().instrument(tracer_provider=provider)
    logger.info(f"Exporting traces to {host}:{port}")
    return provider
