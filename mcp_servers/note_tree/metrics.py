"""Prometheus metrics for the note tree store.

All metric objects are defined here so they can be imported from any module.
"""

from prometheus_client import Counter, Histogram

# ---------------------------------------------------------------------------
# Store operation metrics
# ---------------------------------------------------------------------------

STORE_OPERATIONS = Counter(
    "notezone_store_operations_total",
    "Total number of document store operations",
    ["operation", "status"],  # status: success, error
)

# ---------------------------------------------------------------------------
# Scan metrics
# ---------------------------------------------------------------------------

SCAN_DURATION = Histogram(
    "notezone_scan_duration_seconds",
    "Duration of a full tree scan in seconds",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

SKIPPED_NOTE_FILES = Counter(
    "notezone_skipped_note_files_total",
    "Note files skipped during a scan because they could not be parsed",
)
