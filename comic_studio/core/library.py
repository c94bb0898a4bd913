import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from comic_studio.errors import ProjectNotFoundError

logger = logging.getLogger(__name__)


class ProjectLibrary:
    """Stores session snapshots as JSON files, one per project."""

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, name: str) -> Path:
        safe_name = "".join(x for x in name if x.isalnum() or x in (' ', '_', '-')).strip().replace(' ', '_')
        if not safe_name:
            raise ValueError(f"Invalid project name: '{name}'")
        return self.base_dir / f"{safe_name}.json"

    def save(self, name: str, snapshot: Dict[str, Any]) -> Path:
        path = self._path(name)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(snapshot, f, ensure_ascii=False, indent=4)
        logger.info(f"Project '{name}' saved to {path}")
        return path

    def load(self, name: str) -> Dict[str, Any]:
        path = self._path(name)
        if not path.exists():
            raise ProjectNotFoundError(name)
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def list_projects(self) -> List[str]:
        return sorted(p.stem for p in self.base_dir.glob("*.json"))

    def delete(self, name: str):
        path = self._path(name)
        if not path.exists():
            raise ProjectNotFoundError(name)
        path.unlink()
        logger.info(f"Project '{name}' deleted")
