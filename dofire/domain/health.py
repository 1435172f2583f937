from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

import structlog

from dofire.config import AppSettings
from dofire.core.health import DatabaseStatus, classify_db_status
from dofire.storage import Repository, StorageError

logger = structlog.get_logger(__name__)


def check_database(repo: Repository, settings: AppSettings) -> DatabaseStatus:
    """
    Time a ping; a failing or hung backend is reported as down, never raised.

    The ping runs on a worker thread so the request stops waiting after
    ``db_timeout_ms`` even if the driver does not give up on its own.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="health-ping")
    started = time.perf_counter()
    try:
        executor.submit(repo.ping).result(timeout=settings.db_timeout_ms / 1000)
    except FutureTimeoutError:
        logger.error("health_check_db_timeout", timeout_ms=settings.db_timeout_ms)
        return "down"
    except StorageError as exc:
        logger.error("health_check_db_error", error=str(exc))
        return "down"
    finally:
        executor.shutdown(wait=False)

    elapsed_ms = (time.perf_counter() - started) * 1000
    return classify_db_status(
        elapsed_ms,
        degraded_threshold_ms=settings.db_degraded_threshold_ms,
        timeout_ms=settings.db_timeout_ms,
    )
