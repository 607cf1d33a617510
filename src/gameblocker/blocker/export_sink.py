# src/gameblocker/blocker/export_sink.py
import logging
from pathlib import Path

from gameblocker.errors import ArtifactNotFoundError, InvalidArtifactNameError

from .batch_script import ScriptPair
from .config import EXPORTS_DIR

logger = logging.getLogger(__name__)


class ExportSink:
    """Stores generated scripts as files in one flat directory."""

    def __init__(self, exports_dir=EXPORTS_DIR):
        self.exports_dir = Path(exports_dir)
        self.exports_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, filename: str) -> Path:
        if not filename or Path(filename).name != filename or filename in (".", ".."):
            raise InvalidArtifactNameError(f"invalid file name: {filename!r}")
        return self.exports_dir / filename

    def save(self, filename: str, text: str) -> Path:
        path = self.path_for(filename)
        # newline="" keeps the generator's CRLF line endings intact
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        return path

    def save_pair(self, pair: ScriptPair) -> tuple:
        return self.save(pair.block_name, pair.block_text), self.save(pair.unblock_name, pair.unblock_text)

    def open_path(self, filename: str) -> Path:
        path = self.path_for(filename)
        if not path.is_file():
            raise ArtifactNotFoundError(f"{filename} not found")
        return path

    def delete(self, filename: str) -> bool:
        """Best-effort removal; returns whether a file was actually deleted."""
        try:
            self.path_for(filename).unlink()
            return True
        except FileNotFoundError:
            logger.warning("Export file %s already gone", filename)
        except (OSError, InvalidArtifactNameError) as exc:
            logger.warning("Could not delete export file %s: %s", filename, exc)
        return False
