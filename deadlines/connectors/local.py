"""Filesystem source: ``<root>/<category>/<name>.yml``."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List

from deadlines.models.domain import SourceFile

from .base import BaseSource, PermanentError


class LocalSource(BaseSource):
    name = "local"

    def __init__(self, root_dir: str | Path, extension: str = ".yml") -> None:
        super().__init__(extension)
        self.root = Path(root_dir).expanduser()

    async def list_files(self) -> List[SourceFile]:
        return await asyncio.to_thread(self._scan)

    def _scan(self) -> List[SourceFile]:
        try:
            categories = sorted(p for p in self.root.iterdir() if p.is_dir())
        except OSError as exc:
            raise PermanentError(f"cannot list root {self.root}: {exc}") from exc

        files: List[SourceFile] = []
        for category_dir in categories:
            try:
                entries = sorted(category_dir.iterdir())
            except OSError as exc:
                self._skip(category_dir.name, exc)
                continue
            for path in entries:
                if path.is_file() and self.matches(path.name):
                    files.append(SourceFile(category=category_dir.name, name=path.name, location=str(path)))
        return files

    async def read(self, file: SourceFile) -> str:
        return await asyncio.to_thread(Path(file.location).read_text, encoding="utf-8")
