# src/gameblocker/db/models.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Website(Base):
    __tablename__ = "websites"
    id = Column(Integer, primary_key=True)
    url = Column(String(253), nullable=False, unique=True)  # bare domain, no scheme/www/trailing slash

    def as_dict(self):
        return {"id": self.id, "url": self.url}


class Program(Base):
    __tablename__ = "programs"
    id = Column(Integer, primary_key=True)
    name = Column(String(256), nullable=False)
    path = Column(String(1024), nullable=False)  # may contain one "*" segment
    process_name = Column(String(256), nullable=False)

    def as_dict(self):
        return {"id": self.id, "name": self.name, "path": self.path, "processName": self.process_name}


class VersionState(Base):
    __tablename__ = "version_state"
    id = Column(Integer, primary_key=True)
    major = Column(Integer, nullable=False, default=1)
    minor = Column(Integer, nullable=False, default=0)
    patch = Column(Integer, nullable=False, default=0)


class ExportRecord(Base):
    __tablename__ = "export_history"
    id = Column(Integer, primary_key=True, autoincrement=True)
    version = Column(String(32), nullable=False, unique=True, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), index=True)
    block_file = Column(String(256), nullable=False)
    unblock_file = Column(String(256), nullable=False)

    def as_dict(self):
        return {
            "version": self.version,
            "date": self.created_at.isoformat() if self.created_at else None,
            "blockFile": self.block_file,
            "unblockFile": self.unblock_file,
        }
