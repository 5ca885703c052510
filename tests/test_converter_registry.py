import logging
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

import pytest

from clean_mapping import ConversionContext
from clean_mapping import ConversionFailed
from clean_mapping import Converter
from clean_mapping import ConverterRegistry
from clean_mapping import NoConverterFound
from clean_mapping import RegistryFrozen
from clean_mapping import Simple
from clean_mapping.mapping import Cast
from clean_mapping.mapping import PassThrough


class Color(str, Enum):
    RED = "red"


class Upper(Converter):
    source_type = str
    target_type = str

    def convert(self, context: ConversionContext, registry: ConverterRegistry) -> Any:
        return context.value.upper()


@pytest.fixture
def registry():
    return ConverterRegistry([PassThrough(str), PassThrough(int), Cast(str, Enum)])


def convert(registry, value, cls, field="Widget.name"):
    return registry.convert(
        ConversionContext(value=value, target=Simple(cls=cls), field=field)
    )


def test_convert(registry):
    assert convert(registry, "a", str) == "a"


def test_convert_none(registry):
    assert convert(registry, None, str) is None


def test_find(registry):
    assert isinstance(registry.find(str, str), PassThrough)


def test_find_none(registry):
    assert registry.find(float, str) is None


def test_find_subclass_of_target(registry):
    # PassThrough(str) cannot produce a Color, the Enum converter is used
    assert convert(registry, "red", Color) is Color.RED


def test_find_subclass_of_source(registry):
    assert convert(registry, True, int) is True


def test_no_converter_found(registry):
    with pytest.raises(NoConverterFound) as e:
        convert(registry, 1.2, str)

    assert e.value.source is float
    assert e.value.target == Simple(cls=str)
    assert e.value.field == "Widget.name"
    assert str(e.value) == "no converter from float to str (field 'Widget.name')"


def test_register_replaces(registry, caplog):
    converter = Upper()
    with caplog.at_level(logging.WARNING):
        registry.register(converter)

    assert registry.find(str, str) is converter
    assert convert(registry, "a", str) == "A"
    assert "replacing converter PassThrough(str -> str)" in caplog.text


def test_register_new_pair_no_warning(caplog):
    registry = ConverterRegistry()
    with caplog.at_level(logging.WARNING):
        registry.register(Upper())

    assert caplog.text == ""
    assert (str, str) in registry
    assert len(registry) == 1


def test_freeze(registry):
    registry.freeze()

    assert registry.frozen
    with pytest.raises(RegistryFrozen):
        registry.register(Upper())


def test_convert_after_freeze(registry):
    registry.freeze()

    assert convert(registry, "a", str) == "a"


class Keys(Converter):
    source_type = Mapping
    target_type = list

    def convert(self, context: ConversionContext, registry: ConverterRegistry) -> Any:
        return list(context.value)


def test_find_virtual_subclass_of_source():
    registry = ConverterRegistry([Keys()])

    assert isinstance(registry.find(MappingProxyType, list), Keys)
    assert isinstance(registry.find(dict, list), Keys)


def test_find_real_base_before_virtual_base():
    registry = ConverterRegistry([Keys(), Cast(dict, list)])

    assert isinstance(registry.find(dict, list), Cast)


def test_conversion_failed(registry):
    with pytest.raises(ConversionFailed) as e:
        convert(registry, "blue", Color, field="Widget.color")

    assert e.value.value == "blue"
    assert e.value.target == Simple(cls=Color)
    assert e.value.field == "Widget.color"
    assert isinstance(e.value.__cause__, ValueError)
    assert str(e.value).startswith(
        "cannot convert 'blue' to Color (field 'Widget.color'): "
    )


def test_mapping_errors_are_not_wrapped():
    class Failing(Converter):
        source_type = str
        target_type = str

        def convert(self, context, registry):
            raise NoConverterFound(int, Simple(cls=str), "Widget.other")

    registry = ConverterRegistry([Failing()])

    with pytest.raises(NoConverterFound) as e:
        convert(registry, "a", str)

    assert e.value.field == "Widget.other"
