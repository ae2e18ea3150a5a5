"""Observability: structured logs, Prometheus metrics, tracing and Sentry.

Every request gets an id (taken from ``X-Request-ID`` or generated) that is
bound into the structlog context, so each log line emitted while serving the
request carries it. Metrics are labelled by endpoint template, never by raw
path.
"""

import logging
import re
import time
import uuid
from collections.abc import MutableMapping
from contextvars import ContextVar
from typing import Any

import sentry_sdk
import structlog
from fastapi import FastAPI, Request, Response
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from research_records.core.config import get_settings

settings = get_settings()

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

RESEARCH_OPERATIONS = Counter(
    "research_operations_total",
    "Research record operations",
    ["kind", "operation"],  # create, update, delete, bulk_delete, export
)

STATS_DURATION = Histogram(
    "stats_computation_duration_seconds",
    "Time spent loading and aggregating research statistics",
    ["kind"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

# UUID or integer path segments
_ID_SEGMENT = re.compile(
    r"/(?:[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}|\d+)(?=/|$)"
)

# Probes and scrapes are counted but not logged
QUIET_PATHS = frozenset({"/metrics", "/api/v1/health"})

SENSITIVE_KEYS = frozenset({"password", "access_token", "token", "authorization", "cookie"})


def get_request_id() -> str | None:
    return request_id_ctx.get()


def normalize_endpoint(path: str) -> str:
    """Replace record ids in a request path with ``{id}``."""
    return _ID_SEGMENT.sub("/{id}", path)


def redact_sensitive(
    logger: Any,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """structlog processor masking credential-bearing keys."""
    for key in SENSITIVE_KEYS & event_dict.keys():
        event_dict[key] = "[redacted]"
    return event_dict


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind a request id to the log context and echo it in the response."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_ctx.set(request_id)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            request_id_ctx.reset(token)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request's outcome and feed the HTTP metrics.

    Unhandled exceptions are logged and counted as 500 before propagating.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        logger = structlog.get_logger()
        endpoint = normalize_endpoint(request.url.path)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            self._observe(request.method, endpoint, 500, time.perf_counter() - start_time)
            logger.exception("Request failed", endpoint=endpoint)
            raise

        duration = time.perf_counter() - start_time
        self._observe(request.method, endpoint, response.status_code, duration)

        if request.url.path not in QUIET_PATHS:
            log = logger.warning if response.status_code >= 500 else logger.info
            log(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
                client_ip=request.client.host if request.client else None,
            )
        return response

    @staticmethod
    def _observe(method: str, endpoint: str, status_code: int, duration: float) -> None:
        REQUEST_COUNT.labels(method=method, endpoint=endpoint, status_code=status_code).inc()
        REQUEST_LATENCY.labels(method=method, endpoint=endpoint).observe(duration)


def configure_structlog() -> None:
    """JSON logs in production, a readable console renderer in debug mode."""
    renderer = (
        structlog.dev.ConsoleRenderer()
        if settings.debug
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            redact_sensitive,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=logging.DEBUG if settings.debug else logging.INFO,
    )


def setup_opentelemetry(app: FastAPI) -> None:
    """Export traces over OTLP when an endpoint is configured."""
    if not settings.otlp_endpoint:
        structlog.get_logger().info("OpenTelemetry disabled (no OTLP endpoint configured)")
        return

    provider = TracerProvider(
        resource=Resource(attributes={SERVICE_NAME: settings.service_name})
    )
    provider.add_span_processor(
        BatchSpanProcessor(
            OTLPSpanExporter(endpoint=settings.otlp_endpoint, insecure=settings.otlp_insecure)
        )
    )
    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app, excluded_urls=",".join(sorted(QUIET_PATHS)))

    structlog.get_logger().info(
        "OpenTelemetry configured",
        otlp_endpoint=settings.otlp_endpoint,
        service_name=settings.service_name,
    )


def setup_sentry() -> None:
    """Report unhandled errors to Sentry when a DSN is configured."""
    if not settings.sentry_dsn:
        structlog.get_logger().info("Sentry disabled (no DSN configured)")
        return

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        release=f"{settings.service_name}@{settings.app_version}",
        traces_sample_rate=settings.sentry_traces_sample_rate,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        # Abstracts and author emails stay out of Sentry
        send_default_pii=False,
    )

    structlog.get_logger().info("Sentry configured", environment=settings.environment)


def setup_observability(app: FastAPI) -> None:
    """Configure logging, Sentry and tracing, and mount ``/metrics``."""
    configure_structlog()
    setup_sentry()
    setup_opentelemetry(app)

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


def record_research_operation(kind: str, operation: str, count: int = 1) -> None:
    RESEARCH_OPERATIONS.labels(kind=kind, operation=operation).inc(count)


def record_stats_computation(kind: str, duration: float) -> None:
    """Observe how long a stats request took to load and aggregate."""
    STATS_DURATION.labels(kind=kind).observe(duration)
