import pytest

from fileapi.resources.json_validation import is_valid_json, parse_json_content


@pytest.mark.parametrize(
    "text",
    ['{"k": 1}', "[1, 2, 3]", '"texto"', "42", "-1.5e3", "true", "null", "  {}  ", '{"a": {"b": [null]}}'],
)
def test_well_formed(text):
    assert is_valid_json(text) is True


@pytest.mark.parametrize(
    "text",
    ["", "not json", "{'k': 1}", '{"k": 1,}', "[1, 2", "NaN", "Infinity", "-Infinity", '{"k": NaN}', "{} {}"],
)
def test_malformed(text):
    assert is_valid_json(text) is False


def test_bytes_accepted():
    assert is_valid_json(b'{"clave": "valor"}') is True


def test_non_utf8_bytes_rejected():
    assert is_valid_json(b'"\xff\xfe"') is False


def test_parse_keeps_key_order():
    value = parse_json_content(b'{"z": 1, "a": [true, null, 2.5], "m": "x"}')
    assert list(value) == ["z", "a", "m"]
    assert value["a"] == [True, None, 2.5]


def test_parse_scalar_top_level():
    assert parse_json_content("3") == 3


def test_parse_rejects_malformed():
    with pytest.raises(ValueError):
        parse_json_content("{")


@pytest.mark.parametrize("text", ["[" * 100000, "[" * 100000 + "]" * 100000, '{"a":' * 100000])
def test_deep_nesting_is_not_valid(text):
    assert is_valid_json(text) is False


def test_deep_nesting_raises_value_error():
    with pytest.raises(ValueError, match="too deep"):
        parse_json_content("[" * 100000 + "]" * 100000)
