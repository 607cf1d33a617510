# src/gameblocker/api/blocklist.py
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from gameblocker import store
from gameblocker.db.session import get_db
from gameblocker.errors import DuplicateWebsiteError, NotFoundError, ValidationError

router = APIRouter()


# -------------------------------------------------------------------
# Schemas
# -------------------------------------------------------------------
class WebsiteIn(BaseModel):
    url: str = ""


class ProgramIn(BaseModel):
    name: str = ""
    path: str = ""
    processName: Optional[str] = Field(default=None, description="Executable name; defaults to the path's file name")


# -------------------------------------------------------------------
# Routes
# -------------------------------------------------------------------
@router.get("/blocklist")
def get_blocklist(db: Annotated[Session, Depends(get_db)]):
    return store.blocklist_summary(db)


@router.post("/websites")
def add_website(body: WebsiteIn, db: Annotated[Session, Depends(get_db)]):
    try:
        return store.add_website(db, body.url).as_dict()
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DuplicateWebsiteError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.delete("/websites/{website_id}")
def delete_website(website_id: int, db: Annotated[Session, Depends(get_db)]):
    try:
        store.remove_website(db, website_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True}


@router.post("/programs")
def add_program(body: ProgramIn, db: Annotated[Session, Depends(get_db)]):
    try:
        return store.add_program(db, body.name, body.path, body.processName).as_dict()
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/programs/{program_id}")
def delete_program(program_id: int, db: Annotated[Session, Depends(get_db)]):
    try:
        store.remove_program(db, program_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True}
