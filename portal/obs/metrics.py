"""Central registry for Prometheus metrics used across the backend."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram


REQUEST_COUNTER = Counter(
	"portal_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"portal_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

SOCKET_CLIENTS = Gauge(
	"portal_socketio_clients",
	"Active Socket.IO clients per namespace",
	["namespace"],
)

SOCKET_EVENTS = Counter(
	"portal_socketio_events_total",
	"Socket.IO events handled or emitted per namespace",
	["namespace", "event"],
)

SOCKET_ROOM_JOINS = Counter(
	"portal_socketio_room_joins_total",
	"Club rooms entered by Socket.IO connections",
)

FEED_REQUESTS = Counter(
	"portal_feed_requests_total",
	"Combined feed requests",
	["result"],
)

FEED_LATENCY = Histogram(
	"portal_feed_build_seconds",
	"Time spent fetching and merging the combined feed",
	buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

FEED_ITEMS = Histogram(
	"portal_feed_items",
	"Number of items returned in a combined feed",
	buckets=(0, 5, 10, 25, 50, 100, 250, 500, 1000),
)

NOTIFICATIONS_EMITTED = Counter(
	"portal_notifications_emitted_total",
	"Real-time notifications handed to the broadcaster",
	["type", "scope"],
)

NOTIFICATIONS_FAILED = Counter(
	"portal_notifications_failed_total",
	"Real-time notifications that failed to emit",
	["type"],
)

POSTS_CREATED = Counter(
	"portal_posts_created_total",
	"Notices, announcements and events created",
	["kind"],
)

POSTGRES_UP = Gauge(
	"portal_postgres_up",
	"Postgres readiness (1 up, 0 down)",
)


def observe_request(route: str, method: str, status: int, elapsed_seconds: float) -> None:
	REQUEST_COUNTER.labels(route=route, method=method, status=str(status)).inc()
	REQUEST_LATENCY.labels(route=route, method=method).observe(elapsed_seconds)


def socket_connected(namespace: str) -> None:
	SOCKET_CLIENTS.labels(namespace=namespace).inc()


def socket_disconnected(namespace: str) -> None:
	SOCKET_CLIENTS.labels(namespace=namespace).dec()


def socket_event(namespace: str, event: str) -> None:
	SOCKET_EVENTS.labels(namespace=namespace, event=event).inc()


def inc_room_joins(count: int = 1) -> None:
	if count > 0:
		SOCKET_ROOM_JOINS.inc(count)


def feed_request(result: str) -> None:
	FEED_REQUESTS.labels(result=result).inc()


def observe_feed(elapsed_seconds: float, items: int) -> None:
	FEED_LATENCY.observe(elapsed_seconds)
	FEED_ITEMS.observe(items)


def notification_emitted(kind: str, scope: str) -> None:
	NOTIFICATIONS_EMITTED.labels(type=kind, scope=scope).inc()


def notification_failed(kind: str) -> None:
	NOTIFICATIONS_FAILED.labels(type=kind).inc()


def inc_post_created(kind: str) -> None:
	POSTS_CREATED.labels(kind=kind).inc()


def mark_postgres(ok: bool) -> None:
	POSTGRES_UP.set(1 if ok else 0)
