"""Tests for the helper functions."""

from __future__ import annotations

import json

import pytest

from csharp_proxy_generator import helper


@pytest.mark.parametrize(
    ("name", "expected"),
    [("List`1", "List"), ("Dictionary`2", "Dictionary"), ("BookDto", "BookDto"), ("Task`1", "Task")],
)
def test_strip_generic_arity(name, expected):
    assert helper.strip_generic_arity(name) == expected


@pytest.mark.parametrize(
    ("name", "expected"),
    [("Int32", "int"), ("String[]", "string[]"), ("Byte[][]", "byte[][]"), ("BookDto", "BookDto"), ("Guid[]", "Guid[]")],
)
def test_normalize_type_name(name, expected):
    assert helper.normalize_type_name(name) == expected


@pytest.mark.parametrize(("name", "expected"), [("id", "id"), ("event", "@event"), ("class", "@class")])
def test_sanitize_name(name, expected):
    assert helper.sanitize_name(name) == expected


def test_simple_name():
    assert helper.simple_name("Acme.BookStore.BookStoreHttpApiClientModule") == "BookStoreHttpApiClientModule"
    assert helper.simple_name("Module") == "Module"


def test_pascal_case_keys_is_recursive_and_keeps_order():
    value = {"uniqueName": "GetAsync", "parameters": [{"nameOnMethod": "id"}], "returnValue": {"type": "X"}}

    converted = helper.pascal_case_keys(value)

    assert converted == {"UniqueName": "GetAsync", "Parameters": [{"NameOnMethod": "id"}], "ReturnValue": {"Type": "X"}}
    assert list(converted) == ["UniqueName", "Parameters", "ReturnValue"]


def test_csharp_string_literal_escapes_quotes_and_backslashes():
    text = json.dumps({"url": "api/app/book/{id}", "note": 'a "quoted" \\ value'})

    literal = helper.csharp_string_literal(text)

    assert literal.startswith('"') and literal.endswith('"')
    assert '\\"url\\"' in literal
    assert "\\\\\\\\ value" in literal
