"""ProjectOperations sobre un `pom.xml` de Maven.

Por qué buffer + flush:
- Un comando hace varias altas/bajas; el pom se lee una vez, se muta en
  memoria y se escribe una sola vez (y solo si cambió).
- Solo se tocan `<project>/<dependencies>`, `<project>/<build>/<plugins>` y
  `<project>/<repositories>`; las secciones `*Management` quedan intactas.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, Iterator, TypeVar

from lxml import etree

from core.domain.models import Dependency, Plugin, Repository
from core.domain.paths import LogicalPath
from core.errors import require
from core.interfaces.services import FileManager
from core.pom_elements import (
    append_dependency,
    append_plugin,
    append_repository,
    dependency_from_element,
    plugin_from_element,
    repository_from_element,
)
from core.xml_utils import children, node_to_bytes, read_xml, sub_element

logger = logging.getLogger(__name__)

POM_FILE = "pom.xml"

T = TypeVar("T")


class ModulePathResolver:
    """Resuelve rutas lógicas dentro del módulo enfocado."""

    def __init__(self, module_root: Path) -> None:
        self._module_root = module_root

    def focused_identifier(self, path: LogicalPath, relative: str) -> Path:
        base = self._module_root / path.value if path.value else self._module_root
        return base / relative


class MavenProjectOperations:
    """Altas/bajas de dependencias, plugins y repositorios en el pom del módulo."""

    def __init__(
        self,
        project_root: Path,
        *,
        file_manager: FileManager,
        module: str | None = None,
    ) -> None:
        self._module_root = project_root / module if module else project_root
        self._files = file_manager
        self._tree: etree._ElementTree | None = None
        self._dirty = False

    @property
    def module_root(self) -> Path:
        return self._module_root

    @property
    def pom_path(self) -> Path:
        return self._module_root / POM_FILE

    def is_focused_project_available(self) -> bool:
        return self._files.exists(self.pom_path)

    # -- lectura ---------------------------------------------------------

    def _root(self) -> etree._Element:
        if self._tree is None:
            require(self.is_focused_project_available(), f"Project metadata required: no '{self.pom_path}'")
            self._tree = read_xml(self._files.read_bytes(self.pom_path), source=str(self.pom_path))
        return self._tree.getroot()

    def _container(self, path: tuple[str, ...], *, create: bool) -> etree._Element | None:
        node = self._root()
        for tag in path:
            found = next(children(node, tag), None)
            if found is None:
                if not create:
                    return None
                found = sub_element(node, tag)
            node = found
        return node

    def _entries(
        self,
        path: tuple[str, ...],
        tag: str,
        parse: Callable[[etree._Element], T],
    ) -> Iterator[tuple[etree._Element, T]]:
        container = self._container(path, create=False)
        if container is None:
            return
        for element in list(children(container, tag)):
            yield element, parse(element)

    def get_dependencies(self) -> list[Dependency]:
        return [d for _, d in self._entries(("dependencies",), "dependency", dependency_from_element)]

    def get_build_plugins(self) -> list[Plugin]:
        return [p for _, p in self._entries(("build", "plugins"), "plugin", plugin_from_element)]

    def get_repositories(self) -> list[Repository]:
        return [r for _, r in self._entries(("repositories",), "repository", repository_from_element)]

    # -- mutaciones ------------------------------------------------------

    def add_dependencies(self, dependencies: Iterable[Dependency]) -> list[Dependency]:
        added: list[Dependency] = []
        for dependency in dependencies:
            existing = [
                d for _, d in self._entries(("dependencies",), "dependency", dependency_from_element)
                if d.key == dependency.key
            ]
            if existing:
                if existing[0].version != dependency.version:
                    logger.warning(
                        "Keeping %s already in %s (wanted version %s)",
                        existing[0].coordinates,
                        POM_FILE,
                        dependency.version,
                    )
                else:
                    logger.debug("Dependency %s already present", dependency.coordinates)
                continue
            append_dependency(self._container(("dependencies",), create=True), dependency)
            logger.info("Added dependency %s", dependency.coordinates)
            self._dirty = True
            added.append(dependency)
        return added

    def remove_dependencies(self, dependencies: Iterable[Dependency]) -> list[Dependency]:
        removed: list[Dependency] = []
        for dependency in dependencies:
            for element, current in self._entries(("dependencies",), "dependency", dependency_from_element):
                if current.key == dependency.key and _same_version(current.version, dependency.version):
                    element.getparent().remove(element)
                    logger.info("Removed dependency %s", current.coordinates)
                    self._dirty = True
                    removed.append(current)
        return removed

    def add_build_plugins(self, plugins: Iterable[Plugin]) -> list[Plugin]:
        added: list[Plugin] = []
        for plugin in plugins:
            if plugin in self.get_build_plugins():
                logger.debug("Plugin %s already present", plugin.coordinates)
                continue
            append_plugin(self._container(("build", "plugins"), create=True), plugin)
            logger.info("Added build plugin %s", plugin.coordinates)
            self._dirty = True
            added.append(plugin)
        return added

    def remove_build_plugins(self, plugins: Iterable[Plugin]) -> list[Plugin]:
        removed: list[Plugin] = []
        for plugin in plugins:
            for element, current in self._entries(("build", "plugins"), "plugin", plugin_from_element):
                if current.key == plugin.key and _same_version(current.version, plugin.version):
                    element.getparent().remove(element)
                    logger.info("Removed build plugin %s", current.coordinates)
                    self._dirty = True
                    removed.append(current)
        return removed

    def add_repositories(self, repositories: Iterable[Repository]) -> list[Repository]:
        added: list[Repository] = []
        for repository in repositories:
            if any(r.id == repository.id for r in self.get_repositories()):
                logger.debug("Repository %s already present", repository.id)
                continue
            append_repository(self._container(("repositories",), create=True), repository)
            logger.info("Added repository %s (%s)", repository.id, repository.url)
            self._dirty = True
            added.append(repository)
        return added

    def remove_repositories(self, repositories: Iterable[Repository]) -> list[Repository]:
        removed: list[Repository] = []
        for repository in repositories:
            for element, current in self._entries(("repositories",), "repository", repository_from_element):
                if current.id == repository.id:
                    element.getparent().remove(element)
                    logger.info("Removed repository %s", current.id)
                    self._dirty = True
                    removed.append(current)
        return removed

    def flush(self) -> bool:
        """Escribe el pom si hubo mutaciones; devuelve si se escribió.

        Sin mutaciones no se re-serializa: el formato del usuario se respeta.
        """

        tree, dirty = self._tree, self._dirty
        self._tree, self._dirty = None, False
        if tree is None or not dirty:
            return False
        return self._files.create_or_update_file_if_required(self.pom_path, node_to_bytes(tree))


def _same_version(current: str | None, wanted: str | None) -> bool:
    return wanted is None or current == wanted
