"""Marca tipos del proyecto con la anotación del add-on."""

from __future__ import annotations

import logging

from core.domain.models import JavaType
from core.errors import not_none
from core.interfaces.services import TypeLocationService, TypeManagementService

logger = logging.getLogger(__name__)


class AnnotationPropagator:
    def __init__(
        self,
        *,
        type_location: TypeLocationService,
        type_management: TypeManagementService,
        marker: JavaType,
        trigger: JavaType,
    ) -> None:
        self._locate = type_location
        self._manage = type_management
        self._marker = marker
        self._trigger = trigger

    def annotate_type(self, java_type: JavaType | None) -> bool:
        """Añade el marker a `java_type` si existe y no lo tiene ya."""

        not_none(java_type, "Java type required")

        existing = self._locate.get_type_details(java_type)
        if existing is None:
            logger.warning("Type %s not found in the project", java_type)
            return False
        if existing.has_annotation(self._marker):
            logger.debug("%s already annotated with @%s", java_type, self._marker.simple_name)
            return False
        return self._manage.create_or_update_type_on_disk(existing.with_annotation(self._marker))

    def annotate_all(self) -> list[JavaType]:
        """Anota todos los tipos que llevan la anotación disparadora."""

        annotated: list[JavaType] = []
        for java_type in self._locate.find_types_with_annotation(self._trigger):
            if self.annotate_type(java_type):
                annotated.append(java_type)
        return annotated
