"""
Polling worker reclaiming expired previews.

Every GC_INTERVAL_SECONDS the worker deletes preview indices older than
PREVIEW_EXPIRE seconds and purges expired preview handles. Run it next to
the API, or call it once from cron with ``--once``.

Usage:
    search-preview-gc [--once]
"""

import argparse
import logging
import time

from .core.config import settings
from .core.logging_config import setup_logging
from .core.search_client import create_search_client
from .database import SessionLocal, init_db
from .services.garbage_collector import PreviewGarbageCollector
from .services.preview_store import PreviewStore

logger = logging.getLogger("worker")


def run_once(collector: PreviewGarbageCollector) -> None:
    """One sweep: preview indices first, then stored handles."""
    collector.collect()

    db = SessionLocal()
    try:
        PreviewStore(db, settings).purge_expired()
    except Exception as e:
        logger.error(f"Purging preview handles failed: {e}")
        db.rollback()
    finally:
        db.close()


def main(argv=None) -> None:
    """Sweep periodically until interrupted."""
    parser = argparse.ArgumentParser(description="Delete expired preview indices.")
    parser.add_argument("--once", action="store_true", help="run a single sweep and exit")
    args = parser.parse_args(argv)

    setup_logging(log_level=settings.log_level, log_format=settings.log_format)
    init_db()

    collector = PreviewGarbageCollector(create_search_client(settings), settings)

    if args.once:
        run_once(collector)
        return

    logger.info(
        f"Worker started, sweeping every {settings.gc_interval_seconds}s "
        f"(expire={settings.preview_expire}s, prefix={settings.preview_index_prefix})"
    )

    while True:
        try:
            run_once(collector)
            time.sleep(settings.gc_interval_seconds)
        except KeyboardInterrupt:
            logger.info("Worker shutting down")
            break
        except Exception as e:
            logger.error(f"Worker error: {e}")
            time.sleep(settings.gc_interval_seconds)


if __name__ == "__main__":
    main()
