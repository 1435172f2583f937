"""Database status classification used by the health check."""

from typing import Literal

DatabaseStatus = Literal["reachable", "degraded", "down"]


def classify_db_status(
    elapsed_ms: float,
    degraded_threshold_ms: float = 500,
    timeout_ms: float = 2000,
) -> DatabaseStatus:
    """Status of a database round trip that completed in ``elapsed_ms``."""
    if elapsed_ms >= timeout_ms:
        return "down"
    if elapsed_ms >= degraded_threshold_ms:
        return "degraded"
    return "reachable"
