"""Alta/baja del servlet CometD y del filtro CORS en `WEB-INF/web.xml`.

El descriptor solo se lee cuando se cumplen ambas precondiciones (proyecto
enfocado, fichero presente). `prepare_setup`/`prepare_remove` calculan el
contenido nuevo sin escribir; `apply` lo persiste.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from core import web_xml
from core.config import AddonSettings
from core.domain.models import WebXmlParam
from core.domain.paths import LogicalPath
from core.errors import require
from core.interfaces.services import FileManager, PathResolver, ProjectOperations
from core.xml_utils import local_name, node_to_bytes, read_xml

logger = logging.getLogger(__name__)

WEB_XML = "WEB-INF/web.xml"


@dataclass
class DescriptorChange:
    path: Path
    written: bool


@dataclass
class DescriptorEdit:
    """Contenido candidato de `web.xml`, aún sin escribir."""

    path: Path
    content: bytes


class DescriptorMutator:
    def __init__(
        self,
        *,
        file_manager: FileManager,
        path_resolver: PathResolver,
        project_operations: ProjectOperations,
        settings: AddonSettings,
    ) -> None:
        self._files = file_manager
        self._paths = path_resolver
        self._project = project_operations
        self._settings = settings

    def descriptor_path(self) -> Path:
        """Ruta del `web.xml` enfocado; falla si no hay proyecto o no existe."""

        require(self._project.is_focused_project_available(), "Project metadata required")
        path = self._paths.focused_identifier(LogicalPath.SRC_MAIN_WEBAPP, WEB_XML)
        require(self._files.exists(path), f"'{path}' does not exist")
        return path

    def servlet_params(self) -> list[WebXmlParam]:
        s = self._settings
        params = [
            WebXmlParam(name="timeout", value=str(s.timeout_ms)),
            WebXmlParam(name="logLevel", value=str(s.log_level)),
        ]
        if s.transports:
            params.append(WebXmlParam(name="transports", value=s.transports))
        return params

    def setup(self) -> DescriptorChange:
        return self.apply(self.prepare_setup())

    def remove(self) -> DescriptorChange:
        return self.apply(self.prepare_remove())

    def apply(self, edit: DescriptorEdit) -> DescriptorChange:
        written = self._files.create_or_update_file_if_required(edit.path, edit.content)
        return DescriptorChange(path=edit.path, written=written)

    def prepare_setup(self) -> DescriptorEdit:
        path = self.descriptor_path()
        tree = read_xml(self._files.read_bytes(path), source=str(path))
        root = tree.getroot()
        s = self._settings

        if web_xml.set_version(root, s.servlet_version):
            logger.info("web.xml version -> %s", s.servlet_version)

        if web_xml.add_servlet(
            root,
            name=s.servlet_name,
            servlet_class=s.servlet_class,
            url_pattern=s.url_pattern,
            load_on_startup=s.load_on_startup,
            params=self.servlet_params(),
        ):
            logger.info("Registered servlet '%s' on %s", s.servlet_name, s.url_pattern)

        if web_xml.add_filter(
            root,
            name=s.filter_name,
            filter_class=s.filter_class,
            url_pattern=s.url_pattern,
        ):
            logger.info("Registered filter '%s' on %s", s.filter_name, s.url_pattern)

        # El contenedor solo permite conexiones long-lived con async en ambos.
        for element in (
            web_xml.find_servlet_by_name(root, s.servlet_name),
            web_xml.find_filter_by_name(root, s.filter_name),
        ):
            if element is not None and web_xml.set_async_supported(element):
                logger.debug("async-supported added to <%s>", local_name(element))

        return DescriptorEdit(path=path, content=node_to_bytes(tree))

    def prepare_remove(self) -> DescriptorEdit:
        path = self.descriptor_path()
        tree = read_xml(self._files.read_bytes(path), source=str(path))
        root = tree.getroot()
        s = self._settings

        if web_xml.set_version(root, s.downgrade_version):
            logger.info("web.xml version -> %s", s.downgrade_version)

        if web_xml.remove_servlet(root, name=s.servlet_name, servlet_class=s.servlet_class):
            logger.info("Removed servlet '%s'", s.servlet_name)
        else:
            logger.debug("Servlet '%s' not registered, nothing to remove", s.servlet_name)

        if web_xml.remove_filter(root, name=s.filter_name, filter_class=s.filter_class):
            logger.info("Removed filter '%s'", s.filter_name)
        else:
            logger.debug("Filter '%s' not registered, nothing to remove", s.filter_name)

        return DescriptorEdit(path=path, content=node_to_bytes(tree))
