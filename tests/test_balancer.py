"""Tests for the stack-based bracket and quote balancer."""

import json

import pytest

from jsonmend.repair.balancer import balance_brackets


def test_mismatched_closer_is_rewritten():
    assert balance_brackets('{"a": [1, 2, 3}}') == '{"a": [1, 2, 3]}'


def test_unmatched_closer_is_dropped():
    assert balance_brackets('{"a": 1}}') == '{"a": 1}'


def test_open_string_is_closed():
    assert balance_brackets('{"a": "unclosed') == '{"a": "unclosed"}'


def test_frames_closed_innermost_first():
    assert balance_brackets('[{"a": [1, {"b": 2') == '[{"a": [1, {"b": 2}]}]'


def test_brackets_inside_strings_are_ignored():
    text = '{"a": "[}"}'
    assert balance_brackets(text) == text


def test_dangling_backslash_in_open_string():
    assert json.loads(balance_brackets('{"a": "x\\')) == {"a": "x\\"}


@pytest.mark.parametrize(
    "text",
    [
        '{"a": [{"b": [1, 2',
        '[[[',
        '{"a": {"b": {"c": "d"',
        '{"a": [1}, "b": 2]',
        '{"list": ["x", "y"',
    ],
)
def test_balanced_output_decodes(text):
    json.loads(balance_brackets(text))


def test_backslash_outside_string_escapes_nothing():
    assert balance_brackets('{"a": 1 \\}') == '{"a": 1 \\}'
