from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from core.domain.models import JavaType, TypeDetails
from core.errors import ValidationError
from core.services.annotation_propagator import AnnotationPropagator

MARKER = JavaType(fully_qualified_name="org.sillyweasel.rooaddons.cometd.RooCometd")
TRIGGER = JavaType(fully_qualified_name="org.springframework.roo.addon.javabean.RooJavaBean")
OWNER = JavaType(fully_qualified_name="com.example.domain.Owner")
PET = JavaType(fully_qualified_name="com.example.domain.Pet")


def _details(java_type: JavaType, *annotations: JavaType) -> TypeDetails:
    return TypeDetails(java_type=java_type, path=Path(f"/src/{java_type.simple_name}.java"), annotations=list(annotations))


@pytest.fixture
def locate() -> MagicMock:
    return MagicMock()


@pytest.fixture
def manage() -> MagicMock:
    mock = MagicMock()
    mock.create_or_update_type_on_disk.return_value = True
    return mock


@pytest.fixture
def propagator(locate, manage) -> AnnotationPropagator:
    return AnnotationPropagator(type_location=locate, type_management=manage, marker=MARKER, trigger=TRIGGER)


def test_annotate_type_requires_a_type(propagator, locate):
    with pytest.raises(ValidationError, match="Java type required"):
        propagator.annotate_type(None)
    locate.get_type_details.assert_not_called()


def test_annotate_type_adds_the_marker(propagator, locate, manage):
    locate.get_type_details.return_value = _details(OWNER, TRIGGER)

    assert propagator.annotate_type(OWNER)

    saved = manage.create_or_update_type_on_disk.call_args.args[0]
    assert saved.annotations == [TRIGGER, MARKER]


def test_annotate_type_is_idempotent(propagator, locate, manage):
    locate.get_type_details.return_value = _details(OWNER, MARKER)

    assert not propagator.annotate_type(OWNER)
    manage.create_or_update_type_on_disk.assert_not_called()


def test_unknown_type_is_skipped(propagator, locate, manage):
    locate.get_type_details.return_value = None

    assert not propagator.annotate_type(OWNER)
    manage.create_or_update_type_on_disk.assert_not_called()


def test_annotate_all_fans_out_over_trigger_types(propagator, locate, manage):
    locate.find_types_with_annotation.return_value = [OWNER, PET]
    locate.get_type_details.side_effect = lambda t: _details(t, TRIGGER, MARKER) if t == PET else _details(t, TRIGGER)

    assert propagator.annotate_all() == [OWNER]
    locate.find_types_with_annotation.assert_called_once_with(TRIGGER)
    assert manage.create_or_update_type_on_disk.call_count == 1
