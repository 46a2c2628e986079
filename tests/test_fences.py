"""Tests for markdown fence normalization."""

from jsonmend.repair.fences import fenced_blocks, normalize_fences, strip_fenced_blocks


def test_tagged_fence():
    assert normalize_fences('```json\n{"x": 1,}\n```') == '{"x": 1,}'


def test_no_fence_is_trimmed():
    assert normalize_fences('  {"a": 1}  \n') == '{"a": 1}'


def test_prefers_first_json_block():
    text = '```text\nhello\n```\nthen\n```json\n{"a": 1}\n```'
    assert fenced_blocks(text) == ["hello", '{"a": 1}']
    assert normalize_fences(text) == '{"a": 1}'


def test_first_block_when_none_looks_like_json():
    assert normalize_fences("```\nfoo\n```") == "foo"


def test_inline_fence():
    assert normalize_fences('```json{"a":1}```') == '{"a":1}'


def test_unclosed_fence():
    assert normalize_fences('```json\n{"a": 1') == '{"a": 1'


def test_lone_closing_fence():
    assert normalize_fences('{"a": 1}\n```') == '{"a": 1}'


def test_strip_fenced_blocks_keeps_prose():
    text = 'before\n```json\n{"a": 1}\n```\nafter'
    assert strip_fenced_blocks(text) == "before\n\nafter"
