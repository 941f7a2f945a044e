"""Helpers XML sobre lxml.

Por qué lxml:
- Mantiene comentarios, DOCTYPE y el namespace por defecto al re-serializar.
- XPath completo (`..`, predicados por texto) y `getparent()` para borrar un
  nodo desde su padre real.

Las búsquedas ignoran el namespace (`local-name()`): los descriptores reales
declaran `xmlns="http://java.sun.com/xml/ns/javaee"` y los de prueba no.
"""

from __future__ import annotations

from typing import Iterator

from lxml import etree

from core.errors import PreconditionError

_PARSER_OPTIONS = dict(remove_blank_text=True, resolve_entities=False, no_network=True)


def read_xml(data: bytes | str, *, source: str = "<string>") -> etree._ElementTree:
    """Parsea `data`; un XML mal formado es un `PreconditionError`.

    Con `bytes` decodifica lxml según la declaración `<?xml encoding=...?>`
    (ISO-8859-1 en muchos pom antiguos). Un `str` ya está decodificado: se
    fuerza UTF-8 para que la declaración no se aplique dos veces.
    """

    if isinstance(data, str):
        parser = etree.XMLParser(encoding="utf-8", **_PARSER_OPTIONS)
        data = data.encode("utf-8")
    else:
        parser = etree.XMLParser(**_PARSER_OPTIONS)
    try:
        root = etree.fromstring(data, parser)
    except etree.XMLSyntaxError as exc:
        raise PreconditionError(f"'{source}' is not well-formed XML: {exc}") from exc
    return root.getroottree()


def node_to_bytes(tree: etree._ElementTree) -> bytes:
    """Serialización estable en la codificación del propio documento."""

    encoding = tree.docinfo.encoding or "UTF-8"
    if encoding.replace("-", "").lower() == "utf8":
        encoding = "UTF-8"
    return etree.tostring(tree, pretty_print=True, xml_declaration=True, encoding=encoding)


def local_name(element: etree._Element) -> str | None:
    if not isinstance(element.tag, str):
        # Comentarios e instrucciones de procesamiento.
        return None
    return etree.QName(element).localname


def qualified(reference: etree._Element, tag: str) -> str:
    """Nombre de `tag` en el namespace de `reference`."""

    namespace = etree.QName(reference).namespace
    return f"{{{namespace}}}{tag}" if namespace else tag


def children(parent: etree._Element, tag: str) -> Iterator[etree._Element]:
    for child in parent:
        if local_name(child) == tag:
            yield child


def child_text(parent: etree._Element, tag: str) -> str | None:
    for child in children(parent, tag):
        return (child.text or "").strip()
    return None


def sub_element(parent: etree._Element, tag: str, text: str | None = None) -> etree._Element:
    element = etree.SubElement(parent, qualified(parent, tag))
    if text is not None:
        element.text = text
    return element


def find_parent_of(
    root: etree._Element,
    parent_tag: str,
    child_tag: str,
    text: str,
) -> etree._Element | None:
    """Primer `<parent_tag>` que tiene un hijo `<child_tag>` con texto `text`.

    Equivale a `//parent/child[.='text']/..`: devuelve el padre, no el hijo
    que se comparó. Los `*-mapping` cuelgan un nivel más abajo que su
    `*-name`, así que borrar "por nombre" desde la raíz no los encuentra.
    """

    matches = root.xpath(
        "//*[local-name()=$parent]/*[local-name()=$child][normalize-space(.)=$text]/..",
        parent=parent_tag,
        child=child_tag,
        text=text,
    )
    return matches[0] if matches else None


def remove_element(element: etree._Element | None) -> bool:
    """Quita `element` de su padre. `None` o un nodo suelto no es un error."""

    if element is None:
        return False
    parent = element.getparent()
    if parent is None:
        return False
    parent.remove(element)
    return True


def insert_in_order(parent: etree._Element, element: etree._Element, order: tuple[str, ...]) -> None:
    """Reubica `element` (ya hijo de `parent`) tras el último hermano de su tipo.

    Se crea antes con `sub_element` para que herede el namespace del
    documento; un elemento suelto se serializaría con un prefijo propio.

    Sin hermanos del mismo tipo, se coloca antes del primer hijo que según
    `order` va después; si no hay ninguno, al final.
    """

    kind = local_name(element)
    same_kind = [child for child in parent if local_name(child) == kind and child is not element]
    if same_kind:
        same_kind[-1].addnext(element)
        return

    later = set(order[order.index(kind) + 1 :]) if kind in order else set()
    for child in parent:
        if local_name(child) in later:
            child.addprevious(element)
            return
    parent.append(element)
