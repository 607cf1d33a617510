# src/gameblocker/exporter.py
"""Export orchestration: snapshot the store, generate, persist, record."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from prometheus_client import Counter
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gameblocker import store
from gameblocker.blocker.batch_script import ScriptPair, generate_scripts
from gameblocker.blocker.export_sink import ExportSink
from gameblocker.errors import ExportFailedError

logger = logging.getLogger(__name__)

# Serializes snapshot -> write -> version bump across concurrent requests
EXPORT_LOCK = threading.Lock()

EXPORTS_TOTAL = Counter("gameblocker_exports_total", "Total number of block/unblock script pairs exported")


@dataclass(frozen=True)
class ExportResult:
    version: str
    block_file: str
    unblock_file: str
    next_version: str


def preview_scripts(db: Session) -> ScriptPair:
    """Generate the pair for the current version without writing or bumping anything."""
    websites, programs, version = store.snapshot(db)
    return generate_scripts(websites, programs, str(version))


def export_scripts(db: Session, sink: ExportSink) -> ExportResult:
    with EXPORT_LOCK:
        websites, programs, version = store.snapshot(db)
        pair = generate_scripts(websites, programs, str(version))

        try:
            sink.save_pair(pair)
        except OSError as exc:
            db.rollback()
            logger.error("Writing %s scripts failed: %s", pair.version, exc)
            raise ExportFailedError(f"Failed to write BAT files for {pair.version}") from exc

        try:
            store.record_export(db, version, pair.block_name, pair.unblock_name)
        except SQLAlchemyError as exc:
            db.rollback()
            # no history entry means nothing will ever clean these up
            sink.delete(pair.block_name)
            sink.delete(pair.unblock_name)
            logger.error("Recording export %s failed: %s", pair.version, exc)
            raise ExportFailedError(f"Failed to record export {pair.version}") from exc

    EXPORTS_TOTAL.inc()
    logger.info(
        "Exported %s (%d websites, %d programs) -> %s, %s",
        pair.version,
        len(websites),
        len(programs),
        pair.block_name,
        pair.unblock_name,
    )
    return ExportResult(
        version=pair.version,
        block_file=pair.block_name,
        unblock_file=pair.unblock_name,
        next_version=str(version.bump_patch()),
    )


def delete_history_entry(db: Session, sink: ExportSink, version: str) -> None:
    """Remove a history entry and, best-effort, the two files it points at."""
    record = store.get_history_entry(db, version)
    for filename in (record.block_file, record.unblock_file):
        sink.delete(filename)
    store.remove_history_entry(db, record)
    logger.info("Deleted export %s", version)
