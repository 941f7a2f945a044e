"""Contracts of the host-shell collaborators.

Why Protocols:
- The operations only depend on these shapes; the filesystem/Maven/Java
  adapters implement them and tests swap in in-memory fakes.
- Collaborators are passed to constructors explicitly, never looked up.
- XML descriptors travel as bytes; lxml decodes them per their own declaration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Protocol, runtime_checkable

from core.domain.models import Dependency, JavaType, Plugin, Repository, TypeDetails
from core.domain.paths import LogicalPath


@runtime_checkable
class FileManager(Protocol):
    def exists(self, path: Path) -> bool: ...

    def read_text(self, path: Path) -> str: ...

    def read_bytes(self, path: Path) -> bytes: ...

    def create_or_update_file_if_required(self, path: Path, content: bytes) -> bool:
        """Write `content` only when it differs from the file; return whether it wrote."""

        ...

    def create_or_update_text_file_if_required(self, path: Path, content: str) -> bool: ...


@runtime_checkable
class PathResolver(Protocol):
    def focused_identifier(self, path: LogicalPath, relative: str) -> Path: ...


@runtime_checkable
class ProjectOperations(Protocol):
    """Build-descriptor mutations of the focused module.

    Mutations are buffered; `flush` writes the descriptor once, and only
    when it changed.
    """

    def is_focused_project_available(self) -> bool: ...

    def get_dependencies(self) -> list[Dependency]: ...

    def add_dependencies(self, dependencies: Iterable[Dependency]) -> list[Dependency]: ...

    def remove_dependencies(self, dependencies: Iterable[Dependency]) -> list[Dependency]: ...

    def get_build_plugins(self) -> list[Plugin]: ...

    def add_build_plugins(self, plugins: Iterable[Plugin]) -> list[Plugin]: ...

    def remove_build_plugins(self, plugins: Iterable[Plugin]) -> list[Plugin]: ...

    def get_repositories(self) -> list[Repository]: ...

    def add_repositories(self, repositories: Iterable[Repository]) -> list[Repository]: ...

    def remove_repositories(self, repositories: Iterable[Repository]) -> list[Repository]: ...

    def flush(self) -> bool: ...


@runtime_checkable
class TypeLocationService(Protocol):
    def get_type_details(self, java_type: JavaType) -> TypeDetails | None: ...

    def find_types_with_annotation(self, annotation: JavaType) -> list[JavaType]: ...


@runtime_checkable
class TypeManagementService(Protocol):
    def create_or_update_type_on_disk(self, details: TypeDetails) -> bool: ...
