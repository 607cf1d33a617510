# src/gameblocker/store.py
"""Blocklist store: websites, programs, version state and export history.

Every function takes an open SQLAlchemy session; callers own the session
lifetime (``get_db`` for the API, ``SessionLocal()`` for the CLI).
"""
from __future__ import annotations

import logging
import ntpath
import re
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from gameblocker.blocker.batch_script import WILDCARD, ProgramEntry, WebsiteEntry
from gameblocker.blocker.config import INITIAL_VERSION
from gameblocker.blocker.versioning import Version
from gameblocker.db.models import ExportRecord, Program, VersionState, Website
from gameblocker.errors import (
    DuplicateWebsiteError,
    HistoryEntryNotFoundError,
    InvalidProgramError,
    InvalidWebsiteError,
    ProgramNotFoundError,
    WebsiteNotFoundError,
)

logger = logging.getLogger(__name__)

_SCHEME_WWW_RE = re.compile(r"^(https?://)?(www\.)?", re.IGNORECASE)
_HOSTNAME_RE = re.compile(r"^[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?(\.[a-z0-9-]+)*\.[a-z]{2,}$")


# -------------------------------------------------------------------
# Websites
# -------------------------------------------------------------------
def normalize_url(url: str) -> str:
    """Reduce user input to a bare domain (``https://www.roblox.com/`` -> ``roblox.com``)."""
    cleaned = _SCHEME_WWW_RE.sub("", (url or "").strip()).rstrip("/").lower()
    if not cleaned:
        raise InvalidWebsiteError("URL is required")
    if not _HOSTNAME_RE.match(cleaned):
        raise InvalidWebsiteError(f"not a valid domain: {url!r}")
    return cleaned


def list_websites(db: Session) -> List[Website]:
    return db.query(Website).order_by(Website.id.asc()).all()


def add_website(db: Session, url: str) -> Website:
    cleaned = normalize_url(url)
    if db.query(Website).filter(Website.url == cleaned).first():
        raise DuplicateWebsiteError(f"{cleaned} is already blocked")

    website = Website(url=cleaned)
    db.add(website)
    db.commit()
    db.refresh(website)
    logger.info("Added website %s (id=%s)", website.url, website.id)
    return website


def remove_website(db: Session, website_id: int) -> None:
    website = db.get(Website, website_id)
    if website is None:
        raise WebsiteNotFoundError(f"website {website_id} not found")
    db.delete(website)
    db.commit()
    logger.info("Removed website %s (id=%s)", website.url, website_id)


# -------------------------------------------------------------------
# Programs
# -------------------------------------------------------------------
def default_process_name(path: str) -> str:
    return ntpath.basename(path.rstrip("\\/"))


def list_programs(db: Session) -> List[Program]:
    return db.query(Program).order_by(Program.id.asc()).all()


def add_program(db: Session, name: str, path: str, process_name: Optional[str] = None) -> Program:
    name = (name or "").strip()
    path = (path or "").strip()
    if not name or not path:
        raise InvalidProgramError("Name and path are required")
    if '"' in name or '"' in path:
        raise InvalidProgramError("Name and path must not contain double quotes")

    process_name = (process_name or "").strip() or default_process_name(path)
    if not process_name or WILDCARD in process_name:
        raise InvalidProgramError("processName is required when the path ends in a wildcard")
    if "\\" in process_name or "/" in process_name:
        raise InvalidProgramError("processName must be a file name, not a path")
    if '"' in process_name:
        raise InvalidProgramError("processName must not contain double quotes")

    program = Program(name=name, path=path, process_name=process_name)
    db.add(program)
    db.commit()
    db.refresh(program)
    logger.info("Added program %s -> %s (id=%s)", program.name, program.path, program.id)
    return program


def remove_program(db: Session, program_id: int) -> None:
    program = db.get(Program, program_id)
    if program is None:
        raise ProgramNotFoundError(f"program {program_id} not found")
    db.delete(program)
    db.commit()
    logger.info("Removed program %s (id=%s)", program.name, program_id)


# -------------------------------------------------------------------
# Version state
# -------------------------------------------------------------------
def _version_row(db: Session) -> VersionState:
    row = db.query(VersionState).first()
    if row is None:
        initial = Version.parse(INITIAL_VERSION)
        row = VersionState(major=initial.major, minor=initial.minor, patch=initial.patch)
        db.add(row)
        db.flush()
    return row


def get_version(db: Session) -> Version:
    row = _version_row(db)
    return Version(major=row.major, minor=row.minor, patch=row.patch)


def current_version(db: Session) -> str:
    return str(get_version(db))


def set_version(db: Session, version: Version) -> None:
    row = _version_row(db)
    row.major, row.minor, row.patch = version.major, version.minor, version.patch


# -------------------------------------------------------------------
# Export history
# -------------------------------------------------------------------
def snapshot(db: Session) -> Tuple[List[WebsiteEntry], List[ProgramEntry], Version]:
    """Websites, programs and version as plain values for one export."""
    websites = [WebsiteEntry(url=w.url) for w in list_websites(db)]
    programs = [ProgramEntry(name=p.name, path=p.path, process_name=p.process_name) for p in list_programs(db)]
    return websites, programs, get_version(db)


def record_export(db: Session, version: Version, block_file: str, unblock_file: str) -> ExportRecord:
    """Prepend a history entry for ``version`` and advance the stored version past it."""
    record = ExportRecord(
        version=str(version),
        created_at=datetime.now(timezone.utc),
        block_file=block_file,
        unblock_file=unblock_file,
    )
    db.add(record)
    set_version(db, version.bump_patch())
    db.commit()
    db.refresh(record)
    return record


def list_history(db: Session, offset: int = 0, limit: Optional[int] = None) -> List[ExportRecord]:
    query = db.query(ExportRecord).order_by(ExportRecord.created_at.desc(), ExportRecord.id.desc())
    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def count_history(db: Session) -> int:
    return db.query(ExportRecord).count()


def get_history_entry(db: Session, version: str) -> ExportRecord:
    record = db.query(ExportRecord).filter(ExportRecord.version == version).first()
    if record is None:
        raise HistoryEntryNotFoundError(f"History entry {version} not found")
    return record


def remove_history_entry(db: Session, record: ExportRecord) -> None:
    db.delete(record)
    db.commit()


def blocklist_summary(db: Session) -> dict:
    return {
        "websites": [w.as_dict() for w in list_websites(db)],
        "programs": [p.as_dict() for p in list_programs(db)],
        "version": get_version(db).as_dict(),
        "exportHistory": [h.as_dict() for h in list_history(db)],
    }
