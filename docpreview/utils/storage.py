"""File storage abstraction — flat local upload directory."""

import asyncio
import os
from pathlib import Path

from docpreview.errors import InvalidFileNameError


class LocalStorage:
    """Stores files directly under ``base``. Every name is confined to that directory."""

    def __init__(self, base: Path):
        self.base = Path(base)

    def ensure_base(self) -> None:
        self.base.mkdir(parents=True, exist_ok=True)

    def resolve(self, name: str) -> Path:
        """Join ``name`` onto the root, rejecting anything that leaves it or nests below it."""
        if not name or "\x00" in name:
            raise InvalidFileNameError()
        root = self.base.resolve()
        path = (root / name).resolve()
        if path.parent != root:
            raise InvalidFileNameError()
        return path

    async def store_bytes(self, data: bytes, name: str) -> Path:
        dest = self.resolve(name)
        await asyncio.to_thread(self._write_file, dest, data)
        return dest

    def _write_file(self, dest: Path, data: bytes) -> None:
        dest.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(dest, "xb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
        except FileExistsError:
            # Never clobber an existing upload
            raise
        except OSError:
            dest.unlink(missing_ok=True)
            raise

    async def delete(self, name: str) -> bool:
        """Remove the file. Returns False when it was already gone."""
        path = self.resolve(name)
        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError:
            return False
        return True

    def exists(self, name: str) -> bool:
        try:
            return self.resolve(name).is_file()
        except InvalidFileNameError:
            return False

    def list_names(self) -> list[str]:
        if not self.base.exists():
            return []
        return sorted(p.name for p in self.base.iterdir() if p.is_file())

    def get_url(self, name: str) -> str:
        return f"/uploads/{name}"
