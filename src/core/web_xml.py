"""Edición estructural de `web.xml`.

Todas las funciones son idempotentes y devuelven si tocaron el documento.
"""

from __future__ import annotations

import re
from typing import Iterable

from lxml import etree

from core.domain.models import WebXmlParam
from core.xml_utils import (
    child_text,
    children,
    find_parent_of,
    insert_in_order,
    local_name,
    remove_element,
    sub_element,
)

XSI_SCHEMA_LOCATION = "{http://www.w3.org/2001/XMLSchema-instance}schemaLocation"

# Orden del DTD 2.3; a partir de 2.4 es libre, pero agrupar por tipo se lee mejor.
WEB_APP_ORDER: tuple[str, ...] = (
    "icon",
    "display-name",
    "description",
    "distributable",
    "context-param",
    "filter",
    "filter-mapping",
    "listener",
    "servlet",
    "servlet-mapping",
    "session-config",
    "mime-mapping",
    "welcome-file-list",
    "error-page",
)

# Hijos que preceden a <async-supported> según el XSD 3.0.
_ASYNC_PREDECESSORS: dict[str, frozenset[str]] = {
    "servlet": frozenset(
        {
            "description",
            "display-name",
            "icon",
            "servlet-name",
            "servlet-class",
            "jsp-file",
            "init-param",
            "load-on-startup",
            "enabled",
        }
    ),
    "filter": frozenset({"description", "display-name", "icon", "filter-name", "filter-class"}),
}

_XSD_RE = re.compile(r"web-app_\d+_\d+\.xsd")


def set_version(root: etree._Element, version: str) -> bool:
    """Fija `version` y, si existe, el XSD de `xsi:schemaLocation`."""

    changed = root.get("version") != version
    root.set("version", version)

    location = root.get(XSI_SCHEMA_LOCATION)
    if location:
        xsd = "web-app_{}.xsd".format(version.replace(".", "_"))
        updated = _XSD_RE.sub(xsd, location)
        if updated != location:
            root.set(XSI_SCHEMA_LOCATION, updated)
            changed = True
    return changed


def _append_params(element: etree._Element, params: Iterable[WebXmlParam]) -> None:
    for param in params:
        init_param = sub_element(element, "init-param")
        sub_element(init_param, "param-name", param.name)
        sub_element(init_param, "param-value", param.value)


def find_servlet(root: etree._Element, servlet_class: str) -> etree._Element | None:
    return find_parent_of(root, "servlet", "servlet-class", servlet_class)


def find_servlet_by_name(root: etree._Element, servlet_name: str) -> etree._Element | None:
    return find_parent_of(root, "servlet", "servlet-name", servlet_name)


def find_servlet_mapping(root: etree._Element, servlet_name: str) -> etree._Element | None:
    return find_parent_of(root, "servlet-mapping", "servlet-name", servlet_name)


def find_filter(root: etree._Element, filter_class: str) -> etree._Element | None:
    return find_parent_of(root, "filter", "filter-class", filter_class)


def find_filter_by_name(root: etree._Element, filter_name: str) -> etree._Element | None:
    return find_parent_of(root, "filter", "filter-name", filter_name)


def find_filter_mapping(root: etree._Element, filter_name: str) -> etree._Element | None:
    return find_parent_of(root, "filter-mapping", "filter-name", filter_name)


def add_servlet(
    root: etree._Element,
    *,
    name: str,
    servlet_class: str,
    url_pattern: str,
    load_on_startup: int | None = None,
    params: Iterable[WebXmlParam] = (),
) -> bool:
    """Registra el servlet y su mapping si aún no existen (por nombre)."""

    changed = False
    if find_servlet_by_name(root, name) is None:
        servlet = sub_element(root, "servlet")
        sub_element(servlet, "servlet-name", name)
        sub_element(servlet, "servlet-class", servlet_class)
        _append_params(servlet, params)
        if load_on_startup is not None:
            sub_element(servlet, "load-on-startup", str(load_on_startup))
        insert_in_order(root, servlet, WEB_APP_ORDER)
        changed = True

    if find_servlet_mapping(root, name) is None:
        mapping = sub_element(root, "servlet-mapping")
        sub_element(mapping, "servlet-name", name)
        sub_element(mapping, "url-pattern", url_pattern)
        insert_in_order(root, mapping, WEB_APP_ORDER)
        changed = True
    return changed


def add_filter(
    root: etree._Element,
    *,
    name: str,
    filter_class: str,
    url_pattern: str,
    params: Iterable[WebXmlParam] = (),
) -> bool:
    """Registra el filtro y su mapping si aún no existen (por nombre)."""

    changed = False
    if find_filter_by_name(root, name) is None:
        filter_ = sub_element(root, "filter")
        sub_element(filter_, "filter-name", name)
        sub_element(filter_, "filter-class", filter_class)
        _append_params(filter_, params)
        insert_in_order(root, filter_, WEB_APP_ORDER)
        changed = True

    if find_filter_mapping(root, name) is None:
        mapping = sub_element(root, "filter-mapping")
        sub_element(mapping, "filter-name", name)
        sub_element(mapping, "url-pattern", url_pattern)
        insert_in_order(root, mapping, WEB_APP_ORDER)
        changed = True
    return changed


def set_async_supported(element: etree._Element) -> bool:
    """Marca un `<servlet>` o `<filter>` con `<async-supported>true</async-supported>`."""

    kind = local_name(element)
    if kind not in _ASYNC_PREDECESSORS:
        raise ValueError(f"async-supported only applies to servlet or filter, not {kind!r}")

    if child_text(element, "async-supported") == "true":
        return False
    for existing in list(children(element, "async-supported")):
        element.remove(existing)

    marker = sub_element(element, "async-supported", "true")
    predecessors = [child for child in element if local_name(child) in _ASYNC_PREDECESSORS[kind]]
    if predecessors:
        predecessors[-1].addnext(marker)
    return True


def remove_servlet(root: etree._Element, *, name: str, servlet_class: str) -> bool:
    """Quita servlet (por clase) y mapping (por nombre); lo ausente se ignora."""

    removed_servlet = remove_element(find_servlet(root, servlet_class))
    removed_mapping = remove_element(find_servlet_mapping(root, name))
    return removed_servlet or removed_mapping


def remove_filter(root: etree._Element, *, name: str, filter_class: str) -> bool:
    removed_filter = remove_element(find_filter(root, filter_class))
    removed_mapping = remove_element(find_filter_mapping(root, name))
    return removed_filter or removed_mapping
