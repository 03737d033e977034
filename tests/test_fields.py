from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pytest
from pydantic import BaseModel, Field, PrivateAttr

from bson_mapper.mapping.fields import (
    NotARecordError,
    all_field_values,
    is_record,
    is_record_type,
    record_fields,
    record_type_fields,
    record_value,
    register_record,
    unregister_record,
)


@dataclass
class Inner:
    value: int = field(default=0, metadata={"bson": "value"})


@dataclass
class Sample:
    first: str = field(default="a", metadata={"bson": "firstKey"})
    second: int = field(default=2, metadata={"bson": ",omitempty", "json": "second_json"})
    skipped: str = field(default="s", metadata={"bson": "-"})
    skipped_with_opts: str = field(default="s", metadata={"bson": "-,omitempty"})
    _hidden: str = "h"
    children: List[Inner] = field(default_factory=list)
    lookup: Dict[str, Optional[Inner]] = field(default_factory=dict)


class SampleModel(BaseModel):
    name: str = Field(default="n", json_schema_extra={"bson": "name,omitempty"})
    count: int = 0
    secret: str = Field(default="x", json_schema_extra={"bson": "-"})
    _cache: str = PrivateAttr(default="c")


class Plain:
    def __init__(self, x: int, y: int, label: str = "") -> None:
        self.x = x
        self.y = y
        self.label = label


@pytest.fixture
def registered_plain():
    register_record(Plain, ["x", "y", "label"], tags={"label": {"bson": "tag,omitempty"}})
    yield Plain
    unregister_record(Plain)


def test_dataclass_fields_in_declaration_order_without_hidden_or_suppressed():
    fds = record_fields(Sample(), "bson")
    assert [fd.name for fd in fds] == ["first", "second", "children", "lookup"]
    assert fds[0].tag == "firstKey"
    assert fds[0].value == "a"
    assert fds[1].directive == ("", {"omitempty"})
    # no directive under this tag -> empty string
    assert fds[2].tag == ""


def test_dash_with_options_still_suppresses_field():
    names = [fd.name for fd in record_fields(Sample(), "bson")]
    assert "skipped_with_opts" not in names


def test_fields_respect_tag_name():
    fds = {fd.name: fd for fd in record_fields(Sample(), "json")}
    # under "json" nothing is suppressed except hidden fields
    assert set(fds) == {"first", "second", "skipped", "skipped_with_opts", "children", "lookup"}
    assert fds["second"].tag == "second_json"
    assert fds["first"].tag == ""


def test_dataclass_type_hints_resolved_for_module_level_classes():
    fds = {fd.name: fd for fd in record_fields(Sample(), "bson")}
    assert fds["children"].type_hint == List[Inner]
    assert fds["lookup"].type_hint == Dict[str, Optional[Inner]]


def test_pydantic_fields_use_json_schema_extra():
    fds = record_fields(SampleModel(), "bson")
    assert [fd.name for fd in fds] == ["name", "count"]
    assert fds[0].tag == "name,omitempty"
    assert fds[1].type_hint is int


def test_registered_class_fields(registered_plain):
    fds = record_fields(registered_plain(1, 2), "bson")
    assert [(fd.name, fd.tag, fd.value) for fd in fds] == [
        ("x", "", 1),
        ("y", "", 2),
        ("label", "tag,omitempty", ""),
    ]


def test_register_rejects_directives_for_undeclared_fields():
    with pytest.raises(TypeError):
        register_record(Plain, ["x"], tags={"nope": {"bson": "n"}})
    assert not is_record_type(Plain)


def test_register_rejects_non_class():
    with pytest.raises(TypeError):
        register_record(Plain(1, 2), ["x"])


def test_unregistered_plain_class_is_not_a_record():
    assert not is_record(Plain(1, 2))


def test_is_record_and_record_type():
    assert is_record(Sample())
    assert is_record(SampleModel())
    assert not is_record(Sample)
    assert is_record_type(Sample)
    assert is_record_type(SampleModel)
    for value in ("text", 1, None, [Sample()], {"a": Sample()}):
        assert not is_record(value)
    assert not is_record_type(List[Inner])


def test_record_value_returns_records_and_raises_otherwise():
    s = Sample()
    assert record_value(s) is s
    with pytest.raises(NotARecordError):
        record_value("not a record")
    with pytest.raises(TypeError):
        record_value(Sample)


def test_all_field_values_includes_hidden_and_suppressed_fields():
    values = all_field_values(Sample())
    assert "h" in values
    assert values.count("s") == 2


def test_record_type_fields_without_instance(registered_plain):
    assert record_type_fields(Sample, "bson") == [
        ("first", "firstKey"),
        ("second", ",omitempty"),
        ("children", ""),
        ("lookup", ""),
    ]
    assert record_type_fields(registered_plain, "bson")[-1] == ("label", "tag,omitempty")
    with pytest.raises(NotARecordError):
        record_type_fields(int, "bson")


def test_descriptors_are_rebuilt_each_call():
    s = Sample()
    before = record_fields(s, "bson")
    s.first = "changed"
    after = record_fields(s, "bson")
    assert before[0].value == "a"
    assert after[0].value == "changed"
