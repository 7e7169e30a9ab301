"""Prometheus metrics for the proof store."""

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# Evidence ledger
# ---------------------------------------------------------------------------

greenloop_evidence_added_total = Counter(
    "greenloop_evidence_added_total",
    "Total evidence records appended to the ledger",
    ["kind"],
)

greenloop_evidence_cleared_total = Counter(
    "greenloop_evidence_cleared_total",
    "Total ledger clear operations",
)

greenloop_ledger_size = Gauge(
    "greenloop_ledger_size",
    "Number of evidence records currently held by the ledger",
)

greenloop_persistence_failures_total = Counter(
    "greenloop_persistence_failures_total",
    "Ledger snapshot persistence failures",
    ["operation"],  # load | save
)

greenloop_storage_latency_seconds = Histogram(
    "greenloop_storage_latency_seconds",
    "Local storage table latency in seconds",
    ["operation"],  # get | set | remove
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 1.0],
)

# ---------------------------------------------------------------------------
# Live feed
# ---------------------------------------------------------------------------

greenloop_live_feed_fetch_total = Counter(
    "greenloop_live_feed_fetch_total",
    "Live feed fetch outcomes",
    ["trigger", "status"],  # trigger: timer | manual; status: applied | failed | discarded
)

greenloop_live_feed_fetch_latency_seconds = Histogram(
    "greenloop_live_feed_fetch_latency_seconds",
    "Live feed fetch latency in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
)

greenloop_live_feed_entries = Gauge(
    "greenloop_live_feed_entries",
    "Number of entries in the current live feed",
)

# ---------------------------------------------------------------------------
# Surfacing
# ---------------------------------------------------------------------------

greenloop_toasts_shown_total = Counter(
    "greenloop_toasts_shown_total",
    "Toasts pushed to the toast center",
    ["variant"],
)

greenloop_listener_failures_total = Counter(
    "greenloop_listener_failures_total",
    "Ledger subscribers that raised while handling an event",
)
