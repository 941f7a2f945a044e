"""Cargador del recurso de configuración del add-on.

Este módulo vive en `core/` porque:
- centraliza el *qué* instalamos (dependencias/plugins/repos) sin acoplarse a
  la CLI ni al `pom.xml`
- el XML viaja como package data; se puede sustituir con
  `ROO_COMETD_CONFIGURATION_PATH` para probar otras versiones de CometD.
"""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path

from core.domain.models import AddonConfiguration
from core.errors import PreconditionError, ValidationError
from core.pom_elements import dependency_from_element, plugin_from_element, repository_from_element
from core.xml_utils import read_xml

logger = logging.getLogger(__name__)

CONFIGURATION_RESOURCE = "configuration.xml"


def read_bundled_configuration() -> bytes:
    return resources.files("core.resources").joinpath(CONFIGURATION_RESOURCE).read_bytes()


def parse_configuration(data: bytes | str, *, source: str = CONFIGURATION_RESOURCE) -> AddonConfiguration:
    """Parsea `/configuration/batch/{repositories,dependencies,plugins}`."""

    try:
        root = read_xml(data, source=source).getroot()
    except PreconditionError as exc:
        raise ValidationError(str(exc)) from exc

    if root.tag != "configuration":
        raise ValidationError(f"'{source}': expected <configuration> root, found <{root.tag}>")

    config = AddonConfiguration(
        repositories=[
            repository_from_element(e) for e in root.xpath("/configuration/batch/repositories/repository")
        ],
        dependencies=[
            dependency_from_element(e) for e in root.xpath("/configuration/batch/dependencies/dependency")
        ],
        plugins=[plugin_from_element(e) for e in root.xpath("/configuration/batch/plugins/plugin")],
    )

    # El pom puede heredar versiones; lo que instala el add-on no.
    unversioned = [c.coordinates for c in [*config.dependencies, *config.plugins] if not c.version]
    if unversioned:
        raise ValidationError(f"'{source}': missing <version> for {', '.join(unversioned)}")
    return config


def load_addon_configuration(path: Path | None = None) -> AddonConfiguration:
    """Carga la configuración: `path` si se indica, si no la empaquetada.

    Se relee en cada llamada; nada se cachea entre comandos.
    """

    if path is None:
        config = parse_configuration(read_bundled_configuration())
    else:
        if not path.is_file():
            raise ValidationError(f"configuration file '{path}' does not exist")
        config = parse_configuration(path.read_bytes(), source=str(path))

    logger.debug(
        "Loaded add-on configuration: %d dependencies, %d plugins, %d repositories",
        len(config.dependencies),
        len(config.plugins),
        len(config.repositories),
    )
    return config
