"""
🧪 test_immutables.py — unit-тести для freeze/thaw атрибутів

Перевіряє:
- Рекурсивне заморожування колекцій
- Відновлення JSON-сумісних структур
- Злиття атрибутів
"""

import pytest

from pricecart.shared.utils.immutables import freeze, freeze_attributes, is_frozen_mapping, merge_attributes, thaw


def test_freeze_is_recursive():
    frozen = freeze({"tags": ["a", "b"], "meta": {"x": 1}, "ids": {3}})
    assert is_frozen_mapping(frozen)
    assert frozen["tags"] == ("a", "b")
    assert is_frozen_mapping(frozen["meta"])
    assert frozen["ids"] == frozenset({3})
    with pytest.raises(TypeError):
        frozen["meta"]["x"] = 2


def test_thaw_returns_plain_structures():
    assert thaw(freeze({"tags": ["a"], "meta": {"x": 1}})) == {"tags": ["a"], "meta": {"x": 1}}


def test_freeze_attributes():
    assert dict(freeze_attributes(None)) == {}
    with pytest.raises(TypeError):
        freeze_attributes(["not", "a", "mapping"])


def test_merge_attributes_incoming_wins():
    merged = merge_attributes({"size": "M", "color": "red"}, {"size": "L"})
    assert thaw(merged) == {"size": "L", "color": "red"}
    assert thaw(merge_attributes(None, None)) == {}
