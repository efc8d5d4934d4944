"""Storage for generated configuration files."""
from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List
from app.core.errors import IOFailure, NotFound

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtifactInfo:
    file_name: str
    file_path: str
    created_at: datetime


class ArtifactStore:
    """Flat directory of app-*.json files."""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)

    def write(self, file_name: str, document: Dict[str, Any]) -> Path:
        """
        Write a document as indented JSON.

        Single blocking write, not atomic: a crash can leave a partial file,
        which is fine because the document can be generated again.
        """
        file_path = self.output_dir / file_name
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            file_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        except OSError as e:
            log.error("Failed to write configuration %s: %s", file_path, e, exc_info=True)
            raise IOFailure("Failed to create configuration", cause=e) from e
        log.info("Wrote configuration %s", file_name)
        return file_path

    def list(self) -> List[ArtifactInfo]:
        """All generated files, newest first."""
        if not self.output_dir.exists():
            return []
        try:
            infos = [
                ArtifactInfo(
                    file_name=p.name,
                    file_path=str(p),
                    created_at=datetime.fromtimestamp(p.stat().st_mtime, tz=timezone.utc),
                )
                for p in self.output_dir.iterdir()
                if p.is_file() and p.suffix == ".json"
            ]
        except OSError as e:
            log.error("Failed to list configurations in %s: %s", self.output_dir, e, exc_info=True)
            raise IOFailure("Failed to list configurations", cause=e) from e
        return sorted(infos, key=lambda info: info.created_at, reverse=True)

    def path_for(self, file_name: str) -> Path:
        """Resolve a file name inside output_dir. Anything else is reported as not found."""
        if not file_name or Path(file_name).name != file_name or file_name in (".", ".."):
            raise NotFound("file", file_name, message="File not found")
        file_path = self.output_dir / file_name
        if not file_path.is_file():
            raise NotFound("file", file_name, message="File not found")
        return file_path

    def read(self, file_name: str) -> Dict[str, Any]:
        file_path = self.path_for(file_name)
        try:
            return json.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.error("Failed to read configuration %s: %s", file_path, e, exc_info=True)
            raise IOFailure("Failed to read configuration", cause=e) from e

    def delete(self, file_name: str) -> None:
        file_path = self.path_for(file_name)
        try:
            file_path.unlink()
        except OSError as e:
            log.error("Failed to delete configuration %s: %s", file_path, e, exc_info=True)
            raise IOFailure("Failed to delete configuration", cause=e) from e
        log.info("Deleted configuration %s", file_name)
