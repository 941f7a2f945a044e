"""Operaciones del add-on CometD.

Es el único objeto con el que habla la capa de comandos. `setup`/`remove`
primero calculan el `web.xml` nuevo, luego sincronizan el `pom.xml` y solo
entonces escriben el descriptor: si el pom no se puede leer o validar, el
`web.xml` queda intacto.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path

from adapters.file_manager import DiskFileManager
from adapters.java_sources import JavaSourceTypeLocator, JavaSourceTypeWriter
from adapters.maven_project import MavenProjectOperations, ModulePathResolver
from core.config import AddonSettings
from core.domain.models import JavaType
from core.resources_loader import load_addon_configuration
from core.services.annotation_propagator import AnnotationPropagator
from core.services.dependency_synchronizer import BuildChange, DependencySynchronizer
from core.services.descriptor_mutator import DescriptorChange, DescriptorMutator

logger = logging.getLogger(__name__)


@dataclass
class OperationReport:
    """Resultado de `setup`/`remove` para la capa de presentación."""

    descriptor: DescriptorChange
    build: BuildChange
    written: list[Path] = field(default_factory=list)


class CometdOperations:
    def __init__(
        self,
        *,
        descriptor: DescriptorMutator,
        build: DependencySynchronizer,
        annotations: AnnotationPropagator,
        pom_path: Path | None = None,
    ) -> None:
        self._descriptor = descriptor
        self._build = build
        self._annotations = annotations
        self._pom_path = pom_path

    def is_setup_available(self) -> bool:
        # Hook para futuras precondiciones (p.ej. persistencia configurada).
        return True

    def is_remove_available(self) -> bool:
        return True

    def setup(self) -> OperationReport:
        edit = self._descriptor.prepare_setup()
        build = self._build.setup()
        return self._report(self._descriptor.apply(edit), build)

    def remove(self) -> OperationReport:
        edit = self._descriptor.prepare_remove()
        build = self._build.remove()
        return self._report(self._descriptor.apply(edit), build)

    def annotate_type(self, java_type: JavaType | None) -> bool:
        return self._annotations.annotate_type(java_type)

    def annotate_all(self) -> list[JavaType]:
        return self._annotations.annotate_all()

    def _report(self, descriptor: DescriptorChange, build: BuildChange) -> OperationReport:
        written = [descriptor.path] if descriptor.written else []
        if build.written and self._pom_path is not None:
            written.append(self._pom_path)
        return OperationReport(descriptor=descriptor, build=build, written=written)


def build_operations(
    settings: AddonSettings,
    project_root: Path,
    *,
    module: str | None = None,
) -> CometdOperations:
    """Cablea las operaciones con los adaptadores de disco/Maven/Java."""

    files = DiskFileManager()
    project = MavenProjectOperations(project_root, file_manager=files, module=module)
    paths = ModulePathResolver(project.module_root)
    logger.debug("Focused module: %s", project.module_root)

    return CometdOperations(
        descriptor=DescriptorMutator(
            file_manager=files,
            path_resolver=paths,
            project_operations=project,
            settings=settings,
        ),
        build=DependencySynchronizer(
            project_operations=project,
            configuration_loader=partial(load_addon_configuration, settings.configuration_path),
        ),
        annotations=AnnotationPropagator(
            type_location=JavaSourceTypeLocator(path_resolver=paths, file_manager=files),
            type_management=JavaSourceTypeWriter(file_manager=files),
            marker=JavaType(fully_qualified_name=settings.marker_annotation),
            trigger=JavaType(fully_qualified_name=settings.trigger_annotation),
        ),
        pom_path=project.pom_path,
    )
