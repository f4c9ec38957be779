import logging
import time

from fastapi import Request
from prometheus_client import Counter, Histogram
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.types import ASGIApp

from stashgate.core.errors import UpstreamFailure, error_response

logger = logging.getLogger("stashgate")

share_access_total = Counter(
    "stashgate_share_access_total",
    "Public share access attempts by outcome",
    ["outcome"],
)
storage_operation_seconds = Histogram(
    "stashgate_storage_operation_seconds",
    "Duration of object store calls in seconds",
    ["operation"],
)
storage_failures_total = Counter(
    "stashgate_storage_failures_total",
    "Failed or timed out object store calls",
    ["operation"],
)


def report_share_access(outcome: str) -> None:
    share_access_total.labels(outcome=outcome).inc()


def report_storage_call(operation: str, duration: float, ok: bool) -> None:
    storage_operation_seconds.labels(operation=operation).observe(duration)
    if not ok:
        storage_failures_total.labels(operation=operation).inc()


def setup_monitoring(app: ASGIApp):
    Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    @app.middleware("http")
    async def monitor_requests(request: Request, call_next):
        start_time = time.time()
        response = None
        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception("Unhandled error: %s %s -> %s", request.method, request.url.path, e)
            response = error_response(UpstreamFailure("Internal Server Error"))
        finally:
            process_time = time.time() - start_time
            logger.info("method=%s path=%s status=%s duration=%.4fs",
                        request.method, request.url.path,
                        getattr(response, "status_code", "?"), process_time)
        return response
