"""Logical project paths.

The host shell never hands out absolute paths: callers ask for a logical
location inside the focused module and a relative identifier, and the
path resolver turns that into a file on disk.
"""

from __future__ import annotations

from enum import Enum


class LogicalPath(str, Enum):
    """Well-known directories of a Maven web module."""

    ROOT = ""
    SRC_MAIN_JAVA = "src/main/java"
    SRC_MAIN_RESOURCES = "src/main/resources"
    SRC_MAIN_WEBAPP = "src/main/webapp"

    def label(self) -> str:
        """Human readable label for diagnostics and logging."""

        return self.value or "<module root>"
