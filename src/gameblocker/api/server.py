import logging
import os
from contextlib import asynccontextmanager
from typing import Annotated

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, Gauge, generate_latest
from sqlalchemy.orm import Session

from gameblocker.api.blocklist import router as blocklist_router
from gameblocker.api.exports import router as exports_router
from gameblocker.blocker.config import EXPORTS_DIR
from gameblocker.db.models import Program, Website
from gameblocker.db.session import get_db, init_db

load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_db()
    EXPORTS_DIR.mkdir(parents=True, exist_ok=True)
    logger.info("Game Blocker API ready; exports go to %s", EXPORTS_DIR.resolve())
    yield


app = FastAPI(title="Game Blocker API", version="1.0", lifespan=lifespan)

DASHBOARD_ORIGIN = os.getenv("DASHBOARD_ORIGIN")
# CORS: local Streamlit dashboard plus one optional extra origin
origins = ["http://localhost:8501", "http://127.0.0.1:8501"]
if DASHBOARD_ORIGIN:
    origins.append(DASHBOARD_ORIGIN)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(blocklist_router, prefix="/api", tags=["Blocklist"])
app.include_router(exports_router, prefix="/api", tags=["Exports"])

BLOCKLIST_SIZE = Gauge("gameblocker_blocklist_size", "Number of blocked entries", ["kind"])


@app.get("/metrics")
def metrics(db: Annotated[Session, Depends(get_db)]):
    """Prometheus metrics endpoint."""
    BLOCKLIST_SIZE.labels(kind="website").set(db.query(Website).count())
    BLOCKLIST_SIZE.labels(kind="program").set(db.query(Program).count())
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
