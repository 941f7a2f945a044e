"""Sincroniza dependencias, plugins y repositorios del add-on con el pom."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from core.domain.models import AddonConfiguration, Dependency, Plugin, Repository
from core.errors import require
from core.interfaces.services import ProjectOperations

logger = logging.getLogger(__name__)


@dataclass
class BuildChange:
    """Qué cambió en el descriptor de build durante un comando."""

    dependencies: list[Dependency] = field(default_factory=list)
    plugins: list[Plugin] = field(default_factory=list)
    repositories: list[Repository] = field(default_factory=list)
    written: bool = False


class DependencySynchronizer:
    def __init__(
        self,
        *,
        project_operations: ProjectOperations,
        configuration_loader: Callable[[], AddonConfiguration],
    ) -> None:
        self._project = project_operations
        self._load = configuration_loader

    def setup(self) -> BuildChange:
        require(self._project.is_focused_project_available(), "Project metadata required")
        config = self._load()
        change = BuildChange()

        change.repositories = self._project.add_repositories(config.repositories)
        change.dependencies = self._project.add_dependencies(config.dependencies)

        for plugin in config.plugins:
            registered = [p for p in self._project.get_build_plugins() if p.key == plugin.key]
            if registered == [plugin]:
                logger.debug("Build plugin %s already registered", plugin.coordinates)
                continue
            if registered:
                # No se sobreescribe en sitio: fuera la(s) existente(s), luego alta.
                logger.info(
                    "Replacing build plugin %s with %s",
                    ", ".join(p.coordinates for p in registered),
                    plugin.version,
                )
                self._project.remove_build_plugins(registered)
            change.plugins.extend(self._project.add_build_plugins([plugin]))

        change.written = self._project.flush()
        return change

    def remove(self) -> BuildChange:
        """Quita las coordenadas de la configuración recién cargada.

        Se compara contra la lista requerida, no contra lo registrado: una
        versión personalizada tras `setup` no coincide y se deja en el pom.
        """

        require(self._project.is_focused_project_available(), "Project metadata required")
        config = self._load()
        change = BuildChange()

        change.dependencies = self._project.remove_dependencies(config.dependencies)
        change.plugins = self._project.remove_build_plugins(config.plugins)
        change.repositories = self._project.remove_repositories(config.repositories)

        missing = [
            d.coordinates for d in config.dependencies if d not in change.dependencies
        ] + [p.coordinates for p in config.plugins if p not in change.plugins]
        if missing:
            logger.info("Not registered with the add-on's coordinates, left untouched: %s", ", ".join(missing))

        change.written = self._project.flush()
        return change
