# src/gameblocker/api/exports.py
"""Export, version history and download routes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from gameblocker import exporter, store
from gameblocker.blocker.export_sink import ExportSink
from gameblocker.db.session import get_db
from gameblocker.errors import ExportFailedError, InvalidArtifactNameError, NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()

HISTORY_PAGE_SIZE = 5


def get_sink() -> ExportSink:
    return ExportSink()


@router.post("/export")
def export_bat(
    db: Annotated[Session, Depends(get_db)],
    sink: Annotated[ExportSink, Depends(get_sink)],
):
    try:
        result = exporter.export_scripts(db, sink)
    except ExportFailedError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    except Exception:
        logger.exception("Export crashed")
        raise HTTPException(status_code=500, detail="Failed to export BAT files")

    return {
        "success": True,
        "version": result.version,
        "files": {"block": result.block_file, "unblock": result.unblock_file},
    }


@router.get("/preview")
def preview(db: Annotated[Session, Depends(get_db)]):
    pair = exporter.preview_scripts(db)
    return {
        "version": pair.version,
        "files": {
            "block": {"name": pair.block_name, "content": pair.block_text},
            "unblock": {"name": pair.unblock_name, "content": pair.unblock_text},
        },
    }


@router.get("/versions")
def versions(
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = HISTORY_PAGE_SIZE,
):
    history = store.list_history(db, offset=(page - 1) * per_page, limit=per_page)
    return {
        "currentVersion": store.current_version(db),
        "history": [h.as_dict() for h in history],
        "total": store.count_history(db),
        "page": page,
        "perPage": per_page,
    }


@router.get("/download/{filename}")
def download(filename: str, sink: Annotated[ExportSink, Depends(get_sink)]):
    try:
        path = sink.open_path(filename)
    except InvalidArtifactNameError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return FileResponse(path, media_type="application/octet-stream", filename=filename)


@router.delete("/history/{version}")
def delete_history(
    version: str,
    db: Annotated[Session, Depends(get_db)],
    sink: Annotated[ExportSink, Depends(get_sink)],
):
    try:
        exporter.delete_history_entry(db, sink, version)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        logger.exception("Deleting history entry %s failed", version)
        raise HTTPException(status_code=500, detail="Failed to delete history entry")
    return {"success": True, "message": f"Deleted {version}"}
