from dataclasses import dataclass
from datetime import datetime, UTC
from typing_extensions import TypedDict

import pytest
from pydantic import BaseModel

from simple_api.decoding import decode, encode
from simple_api.errors import DecodeError, ErrorKind


class Item(BaseModel):
    title: str


class Screen(BaseModel):
    data: list[Item]
    generated_at: datetime | None = None


class EchoDict(TypedDict):
    test: str
    key: str


@dataclass
class Point:
    x: int
    y: int


class Count(BaseModel):
    n: int


class Opaque:
    pass


def test_decode_nested_model():
    screen = decode(Screen, b'{"data": [{"title": "UNIT_TEST"}, {"title": "UNIT_TEST"}]}')

    assert len(screen.data) == 2
    assert all(item.title == "UNIT_TEST" for item in screen.data)


def test_decode_typed_dict_and_plain_containers():
    assert decode(EchoDict, b'{"test": "test", "key": "value"}') == {"test": "test", "key": "value"}
    assert decode(dict[str, int], b'{"a": 1}') == {"a": 1}
    assert decode(list[int], b"[1, 2, 3]") == [1, 2, 3]


def test_decode_failure_propagates_with_cause():
    with pytest.raises(DecodeError) as excinfo:
        decode(Screen, b'{"data": "not-a-list"}')

    assert excinfo.value.kind is ErrorKind.DECODE
    assert excinfo.value.target is Screen
    assert excinfo.value.__cause__ is excinfo.value.cause


def test_decode_invalid_json_is_a_decode_error():
    with pytest.raises(DecodeError):
        decode(Item, b"{not json")


@pytest.mark.parametrize(
    ("target", "value"),
    [
        (Screen, Screen(data=[Item(title="a")], generated_at=datetime(2025, 1, 1, tzinfo=UTC))),
        (Point, Point(x=1, y=-2)),
        (dict[str, list[int]], {"a": [1, 2], "b": []}),
    ],
)
def test_encode_then_decode_returns_equal_value(target, value):
    assert decode(target, encode(value)) == value


def test_decode_does_not_coerce_mismatched_json_types():
    with pytest.raises(DecodeError):
        decode(Count, b'{"n": "1"}')
    with pytest.raises(DecodeError):
        decode(list[int], b'["1", "2"]')

    assert decode(Count, b'{"n": 1}') == Count(n=1)


def test_unsupported_target_is_a_decode_error():
    with pytest.raises(DecodeError) as excinfo:
        decode(Opaque, b"{}")

    assert excinfo.value.target is Opaque


def test_encode_handles_models_and_datetimes():
    assert encode({"n": 1}) == b'{"n":1}'
    assert encode(Count(n=2)) == b'{"n":2}'
    assert encode(datetime(2025, 1, 1, tzinfo=UTC)) == b'"2025-01-01T00:00:00Z"'
