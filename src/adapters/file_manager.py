"""FileManager sobre el disco local.

Por qué un adaptador:
- Las operaciones solo conocen el contrato `core.interfaces.services.FileManager`.
- La escritura condicional vive en un único sitio: si el contenido no cambia,
  el fichero no se toca (ni su mtime, ni el rebuild que dispararía).
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class DiskFileManager:
    """Lee y escribe ficheros; el texto es UTF-8, los XML viajan como bytes."""

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def read_bytes(self, path: Path) -> bytes:
        return path.read_bytes()

    def create_or_update_file_if_required(self, path: Path, content: bytes) -> bool:
        existed = path.is_file()
        if existed and path.read_bytes() == content:
            logger.debug("Unchanged %s", path)
            return False

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        logger.info("%s %s", "Updated" if existed else "Created", path)
        return True

    def create_or_update_text_file_if_required(self, path: Path, content: str) -> bool:
        return self.create_or_update_file_if_required(path, content.encode("utf-8"))
