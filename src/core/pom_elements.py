"""Conversión entre elementos Maven (`<dependency>`, `<plugin>`, `<repository>`) y modelos.

Lo usan tanto el cargador del `configuration.xml` empaquetado como el
adaptador del `pom.xml`; ambos tienen la misma forma de elemento.
"""

from __future__ import annotations

from lxml import etree
from pydantic import ValidationError as PydanticValidationError

from core.domain.models import Dependency, Plugin, Repository
from core.errors import ValidationError
from core.xml_utils import child_text, sub_element

# Un plugin sin groupId es de org.apache.maven.plugins (regla de Maven).
DEFAULT_PLUGIN_GROUP = "org.apache.maven.plugins"


def _text(element: etree._Element, tag: str) -> str | None:
    value = child_text(element, tag)
    return value or None


def _build(model, element: etree._Element, **values):
    try:
        return model(**{k: v for k, v in values.items() if v is not None})
    except PydanticValidationError as exc:
        raise ValidationError(
            f"invalid <{etree.QName(element).localname}> at line {element.sourceline}: {exc}"
        ) from exc


def dependency_from_element(element: etree._Element) -> Dependency:
    return _build(
        Dependency,
        element,
        group_id=_text(element, "groupId"),
        artifact_id=_text(element, "artifactId"),
        version=_text(element, "version"),
        type=_text(element, "type"),
        scope=_text(element, "scope"),
        classifier=_text(element, "classifier"),
    )


def plugin_from_element(element: etree._Element) -> Plugin:
    return _build(
        Plugin,
        element,
        group_id=_text(element, "groupId") or DEFAULT_PLUGIN_GROUP,
        artifact_id=_text(element, "artifactId"),
        version=_text(element, "version"),
    )


def repository_from_element(element: etree._Element) -> Repository:
    return _build(
        Repository,
        element,
        id=_text(element, "id"),
        name=_text(element, "name"),
        url=_text(element, "url"),
    )


def append_dependency(parent: etree._Element, dependency: Dependency) -> etree._Element:
    element = sub_element(parent, "dependency")
    sub_element(element, "groupId", dependency.group_id)
    sub_element(element, "artifactId", dependency.artifact_id)
    if dependency.version:
        sub_element(element, "version", dependency.version)
    if dependency.type != "jar":
        sub_element(element, "type", dependency.type)
    if dependency.classifier:
        sub_element(element, "classifier", dependency.classifier)
    if dependency.scope != "compile":
        sub_element(element, "scope", dependency.scope)
    return element


def append_plugin(parent: etree._Element, plugin: Plugin) -> etree._Element:
    element = sub_element(parent, "plugin")
    sub_element(element, "groupId", plugin.group_id)
    sub_element(element, "artifactId", plugin.artifact_id)
    if plugin.version:
        sub_element(element, "version", plugin.version)
    return element


def append_repository(parent: etree._Element, repository: Repository) -> etree._Element:
    element = sub_element(parent, "repository")
    sub_element(element, "id", repository.id)
    if repository.name:
        sub_element(element, "name", repository.name)
    sub_element(element, "url", repository.url)
    return element
