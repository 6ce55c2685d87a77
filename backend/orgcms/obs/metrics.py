"""Central registry for Prometheus metrics used across the backend."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNTER = Counter(
	"orgcms_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"orgcms_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

STORE_ERRORS = Counter(
	"orgcms_store_errors_total",
	"Record store operations that failed",
	["operation", "collection"],
)

VIEW_WRITES = Counter(
	"orgcms_view_count_writes_total",
	"View counter updates by outcome",
	["collection", "result"],
)

ACTIVITY_WRITES = Counter(
	"orgcms_activity_log_writes_total",
	"Activity log appends by outcome",
	["action", "result"],
)

CONTACT_SUBMISSIONS = Counter(
	"orgcms_contact_submissions_total",
	"Contact form submissions by outcome",
	["result"],
)


def observe_request(route: str, method: str, status: int, elapsed_seconds: float) -> None:
	REQUEST_COUNTER.labels(route=route, method=method, status=str(status)).inc()
	REQUEST_LATENCY.labels(route=route, method=method).observe(elapsed_seconds)


def inc_store_error(operation: str, collection: str) -> None:
	STORE_ERRORS.labels(operation=operation, collection=collection).inc()


def inc_view_write(collection: str, result: str) -> None:
	VIEW_WRITES.labels(collection=collection, result=result).inc()


def inc_activity_write(action: str, result: str) -> None:
	ACTIVITY_WRITES.labels(action=action, result=result).inc()


def inc_contact_submission(result: str) -> None:
	CONTACT_SUBMISSIONS.labels(result=result).inc()
