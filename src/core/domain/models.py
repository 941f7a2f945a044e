"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta de coordenadas Maven leídas de XML (nada vacío).
- Los modelos describen *qué* se instala, no *cómo* se escribe en el pom.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Dependency(BaseModel):
    """Dependencia Maven requerida por el add-on."""

    model_config = ConfigDict(frozen=True)

    group_id: str = Field(..., min_length=1)
    artifact_id: str = Field(..., min_length=1)
    version: str | None = Field(default=None, min_length=1)
    type: str = Field(default="jar", min_length=1)
    scope: str = Field(default="compile", min_length=1)
    classifier: str | None = None

    @property
    def key(self) -> tuple[str, str, str, str | None]:
        """Clave de unicidad de Maven (groupId:artifactId:type:classifier)."""

        return (self.group_id, self.artifact_id, self.type, self.classifier)

    @property
    def coordinates(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version or '(managed)'}"


class Plugin(BaseModel):
    """Plugin de build. Dos plugins son el mismo si coinciden groupId y artifactId."""

    model_config = ConfigDict(frozen=True)

    group_id: str = Field(..., min_length=1)
    artifact_id: str = Field(..., min_length=1)
    version: str | None = Field(default=None, min_length=1)

    @property
    def key(self) -> tuple[str, str]:
        return (self.group_id, self.artifact_id)

    @property
    def coordinates(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version or '(managed)'}"


class Repository(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str | None = None
    url: str = Field(..., min_length=1)


class AddonConfiguration(BaseModel):
    """Contenido del `configuration.xml` empaquetado."""

    repositories: list[Repository] = Field(default_factory=list)
    dependencies: list[Dependency] = Field(default_factory=list)
    plugins: list[Plugin] = Field(default_factory=list)


class WebXmlParam(BaseModel):
    """`init-param` de un servlet o filtro."""

    name: str = Field(..., min_length=1)
    value: str


class JavaType(BaseModel):
    """Nombre completamente cualificado de un tipo Java."""

    model_config = ConfigDict(frozen=True)

    fully_qualified_name: str = Field(..., min_length=1, pattern=r"^[A-Za-z_$][\w$]*(\.[A-Za-z_$][\w$]*)*$")

    @property
    def simple_name(self) -> str:
        return self.fully_qualified_name.rsplit(".", 1)[-1]

    @property
    def package(self) -> str:
        if "." not in self.fully_qualified_name:
            return ""
        return self.fully_qualified_name.rsplit(".", 1)[0]

    def __str__(self) -> str:
        return self.fully_qualified_name


class TypeDetails(BaseModel):
    """Tipo del proyecto tal como está en disco.

    `annotations` contiene las anotaciones de la declaración principal ya
    resueltas a su nombre cualificado.
    """

    java_type: JavaType
    path: Path
    annotations: list[JavaType] = Field(default_factory=list)
    source: str = ""

    def has_annotation(self, annotation: JavaType) -> bool:
        return annotation in self.annotations

    def with_annotation(self, annotation: JavaType) -> "TypeDetails":
        if self.has_annotation(annotation):
            return self
        return self.model_copy(update={"annotations": [*self.annotations, annotation]})
