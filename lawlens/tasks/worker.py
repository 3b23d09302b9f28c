"""
Celery worker launcher.

Usage:
  python -m lawlens.tasks.worker

Environment (optional):
  CELERY_LOG_LEVEL=INFO|DEBUG
  CELERY_CONCURRENCY=2
  CELERY_QUEUES=notification,celery
"""

import logging
import multiprocessing
import os
import sys
from typing import List

from lawlens.tasks.celery_app import celery_app
from lawlens.config.settings import settings

REQUIRED_QUEUES = ["notification"]


def default_concurrency() -> int:
    # email delivery is I/O bound; a couple of processes is plenty
    cpu_count = multiprocessing.cpu_count() or 1
    return max(1, min(4, cpu_count))


def build_worker_argv() -> List[str]:
    """Command line handed to celery_app.worker_main"""
    queues = settings.CELERY_QUEUES
    concurrency = settings.CELERY_CONCURRENCY or default_concurrency()
    pool = "solo" if os.name == "nt" else "prefork"

    return [
        "worker",
        "-l",
        settings.CELERY_LOG_LEVEL.lower(),
        "-Q",
        queues,
        "-c",
        str(concurrency),
        "--pool",
        pool,
        "--without-gossip",
        "--without-mingle",
    ]


def main() -> None:
    celery_logger = logging.getLogger("celery")
    argv = build_worker_argv()
    configured = argv[argv.index("-Q") + 1].split(",")

    missing = [q for q in REQUIRED_QUEUES if q not in configured]
    if missing:
        celery_logger.error(f"Worker is not consuming required queues: {missing} (configured: {configured})")

    celery_logger.info(f"Celery worker starting: queues={configured}, concurrency={argv[argv.index('-c') + 1]}")

    try:
        celery_app.worker_main(argv)
    except SystemExit as exc:
        sys.exit(exc.code)


if __name__ == "__main__":
    main()
