"""Localización y anotación de tipos Java en `src/main/java`.

No es un parser de Java: solo entiende lo que necesita el add-on.
- `package`, `import` y las anotaciones que preceden a la declaración del
  tipo principal (el que da nombre al fichero).
- Los comentarios se enmascaran antes de buscar, así que un `@author` de
  Javadoc o un "class Foo" dentro de un comentario no cuentan.
- Tipos anidados no se localizan.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from core.domain.models import JavaType, TypeDetails
from core.domain.paths import LogicalPath
from core.errors import ValidationError
from core.interfaces.services import FileManager, PathResolver

logger = logging.getLogger(__name__)

_COMMENT_RE = re.compile(r"/\*.*?\*/|//[^\n]*", re.DOTALL)
_STRING_RE = re.compile(r'"(?:\\.|[^"\\\n])*"')
_PACKAGE_RE = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.MULTILINE)
_IMPORT_RE = re.compile(r"^\s*import\s+(static\s+)?([\w.]+(?:\.\*)?)\s*;[^\n]*\n?", re.MULTILINE)
_ANNOTATION_RE = re.compile(r"@(?!interface\b)([A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*)")


def _mask(text: str) -> str:
    """Sustituye comentarios y literales por espacios, conservando offsets."""

    def blank(match: re.Match[str]) -> str:
        return re.sub(r"[^\n]", " ", match.group(0))

    return _STRING_RE.sub(blank, _COMMENT_RE.sub(blank, text))


@dataclass
class ParsedSource:
    """Lo que interesa de un `.java` para leer y escribir anotaciones."""

    package: str
    type_name: str
    imports: list[str] = field(default_factory=list)
    annotation_names: list[str] = field(default_factory=list)
    declaration_offset: int = 0
    imports_end_offset: int = 0

    @property
    def java_type(self) -> JavaType:
        name = f"{self.package}.{self.type_name}" if self.package else self.type_name
        return JavaType(fully_qualified_name=name)

    def resolve(self, name: str) -> JavaType:
        """Nombre de anotación tal como se escribió -> nombre cualificado.

        Orden: cualificado en el uso, import explícito, único import con
        comodín, mismo paquete.
        """

        if "." in name:
            return JavaType(fully_qualified_name=name)
        for imported in self.imports:
            if imported.rsplit(".", 1)[-1] == name and not imported.endswith(".*"):
                return JavaType(fully_qualified_name=imported)
        wildcards = [i[:-2] for i in self.imports if i.endswith(".*")]
        if len(wildcards) == 1:
            return JavaType(fully_qualified_name=f"{wildcards[0]}.{name}")
        return JavaType(fully_qualified_name=f"{self.package}.{name}" if self.package else name)

    @property
    def annotations(self) -> list[JavaType]:
        return [self.resolve(name) for name in self.annotation_names]


def parse_java_source(text: str, type_name: str) -> ParsedSource | None:
    """Parsea el tipo `type_name` de `text`; `None` si no se encuentra."""

    masked = _mask(text)
    declaration = re.search(
        rf"(?:@interface|\b(?:class|interface|enum|record))\s+{re.escape(type_name)}\b",
        masked,
    )
    if declaration is None:
        return None

    package_match = _PACKAGE_RE.search(masked)
    header_start = package_match.end() if package_match else 0

    imports: list[str] = []
    imports_end = header_start
    for match in _IMPORT_RE.finditer(masked, header_start, declaration.start()):
        if not match.group(1):
            imports.append(match.group(2))
        imports_end = match.end()

    header = masked[imports_end : declaration.start()]
    return ParsedSource(
        package=package_match.group(1) if package_match else "",
        type_name=type_name,
        imports=imports,
        annotation_names=_ANNOTATION_RE.findall(header),
        declaration_offset=declaration.start(),
        imports_end_offset=imports_end,
    )


def add_annotation(text: str, parsed: ParsedSource, annotation: JavaType) -> str:
    """Devuelve `text` con `annotation` sobre la declaración (e import si hace falta)."""

    simple = annotation.simple_name
    clashes = any(
        i.rsplit(".", 1)[-1] == simple and i != annotation.fully_qualified_name for i in parsed.imports
    ) or simple == parsed.type_name
    needs_import = (
        not clashes
        and annotation.package not in ("", parsed.package)
        and annotation.fully_qualified_name not in parsed.imports
    )
    written = annotation.fully_qualified_name if clashes else simple

    line_start = text.rfind("\n", 0, parsed.declaration_offset) + 1
    indent = re.match(r"[ \t]*", text[line_start:]).group(0)
    updated = f"{text[:line_start]}{indent}@{written}\n{text[line_start:]}"

    if needs_import:
        statement = f"import {annotation.fully_qualified_name};\n"
        if parsed.imports:
            at = parsed.imports_end_offset
            if at > 0 and updated[at - 1] != "\n":
                statement = "\n" + statement
        else:
            package_line = _PACKAGE_RE.search(_mask(text))
            at = updated.find("\n", package_line.end()) + 1 if package_line else 0
            statement = ("\n" if package_line else "") + statement + ("" if package_line else "\n")
        updated = f"{updated[:at]}{statement}{updated[at:]}"
    return updated


class JavaSourceTypeLocator:
    """TypeLocationService sobre los fuentes del módulo enfocado."""

    def __init__(self, *, path_resolver: PathResolver, file_manager: FileManager) -> None:
        self._paths = path_resolver
        self._files = file_manager

    @property
    def source_root(self) -> Path:
        return self._paths.focused_identifier(LogicalPath.SRC_MAIN_JAVA, "")

    def _details(self, path: Path) -> TypeDetails | None:
        source = self._files.read_text(path)
        parsed = parse_java_source(source, path.stem)
        if parsed is None:
            logger.debug("No top-level type %s in %s", path.stem, path)
            return None
        return TypeDetails(
            java_type=parsed.java_type,
            path=path,
            annotations=parsed.annotations,
            source=source,
        )

    def get_type_details(self, java_type: JavaType) -> TypeDetails | None:
        relative = java_type.fully_qualified_name.replace(".", "/") + ".java"
        path = self._paths.focused_identifier(LogicalPath.SRC_MAIN_JAVA, relative)
        if not self._files.exists(path):
            return None
        details = self._details(path)
        if details is None or details.java_type != java_type:
            # Fichero en un directorio que no coincide con su `package`.
            return None
        return details

    def find_types_with_annotation(self, annotation: JavaType) -> list[JavaType]:
        root = self.source_root
        if not root.is_dir():
            return []
        found: list[JavaType] = []
        for path in sorted(root.rglob("*.java")):
            details = self._details(path)
            if details is not None and details.has_annotation(annotation):
                found.append(details.java_type)
        return found


class JavaSourceTypeWriter:
    """TypeManagementService: persiste las anotaciones nuevas de un `TypeDetails`."""

    def __init__(self, *, file_manager: FileManager) -> None:
        self._files = file_manager

    def create_or_update_type_on_disk(self, details: TypeDetails) -> bool:
        source = details.source or self._files.read_text(details.path)
        parsed = parse_java_source(source, details.java_type.simple_name)
        if parsed is None:
            raise ValidationError(f"{details.path} does not declare {details.java_type}")

        present = parsed.annotations
        for annotation in details.annotations:
            if annotation in present:
                continue
            source = add_annotation(source, parsed, annotation)
            parsed = parse_java_source(source, details.java_type.simple_name)
            present = parsed.annotations
            logger.info("Annotated %s with @%s", details.java_type, annotation.simple_name)

        return self._files.create_or_update_text_file_if_required(details.path, source)
