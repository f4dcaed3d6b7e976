"""Tests for the merge engine."""

from __future__ import annotations

import pytest

from fmchain.domain.codec import parse
from fmchain.domain.merge import (
    MergeResult,
    apply_to_file,
    concat_unique,
    merge_documents,
    merge_frontmatter,
    merge_with_file,
    validate_frontmatter,
)
from fmchain.domain.values import EMPTY, NULL, Bool, List, Number, String, Value


def _strings(*items: str) -> List:
    return List(tuple(String(item) for item in items))


class TestConcatUnique:
    def test_base_first_dedup(self) -> None:
        assert concat_unique(_strings("a", "b"), _strings("b", "c")) == _strings("a", "b", "c")

    def test_string_and_number_are_distinct(self) -> None:
        result = concat_unique(_strings("1"), List((Number(1),)))
        assert result == List((String("1"), Number(1)))

    def test_empty_side_counts_as_empty_list(self) -> None:
        assert concat_unique(EMPTY, _strings("a")) == _strings("a")
        assert concat_unique(_strings("a"), NULL) == _strings("a")

    def test_two_non_list_empties(self) -> None:
        assert concat_unique(NULL, NULL) == NULL
        assert concat_unique(EMPTY, EMPTY) == EMPTY
        assert concat_unique(EMPTY, NULL) == EMPTY

    def test_nested_lists_compared_structurally(self) -> None:
        nested = List((_strings("x", "y"),))
        assert concat_unique(nested, nested) == nested


class TestMergeDocuments:
    def test_incoming_wins_scalars(self) -> None:
        result = merge_frontmatter("title: A\nkeep: 1", "title: B")
        assert result.merged == {"title": String("B"), "keep": Number(1)}
        assert result.conflicts == ["title"]
        assert result.added == []

    def test_lists_concatenate(self) -> None:
        result = merge_frontmatter("tags: [x]", "tags: [y, x]")
        assert result.merged["tags"] == _strings("x", "y")

    def test_key_order(self) -> None:
        result = merge_frontmatter("a: 1\nb: 2", "c: 3\nb: 4")
        assert list(result.merged) == ["a", "b", "c"]
        assert result.added == ["c"]
        assert result.conflicts == ["b"]

    def test_scalar_replaced_by_list(self) -> None:
        result = merge_frontmatter("tags: solo", "tags: [a]")
        assert result.merged["tags"] == _strings("a")

    def test_list_replaced_by_scalar(self) -> None:
        result = merge_frontmatter("tags: [a]", "tags: solo")
        assert result.merged["tags"] == String("solo")

    def test_empty_marker_filled_by_list(self) -> None:
        result = merge_frontmatter("tags:", "tags: [a]")
        assert result.merged["tags"] == _strings("a")

    def test_inputs_not_mutated(self) -> None:
        base = {"a": Number(1)}
        incoming = {"b": Number(2)}
        merge_documents(base, incoming)
        assert base == {"a": Number(1)}
        assert incoming == {"b": Number(2)}

    def test_text_property(self) -> None:
        result = MergeResult(merged={"a": Number(1)})
        assert result.text == "a: 1\n"


class TestMergeWithFile:
    TEMPLATE = "type: note\ntags:\n  - base\n  - project\nstatus: active"

    def test_file_wins_and_bookkeeping(self) -> None:
        file_text = "---\ntitle: Plan\ntags: [mine]\n---\nNotes\n"
        result = merge_with_file(file_text, self.TEMPLATE)
        assert list(result.merged) == ["type", "tags", "status", "title"]
        assert result.merged["tags"] == _strings("base", "project", "mine")
        assert result.conflicts == ["tags"]
        assert result.added == ["type", "status"]

    def test_file_scalar_wins(self) -> None:
        result = merge_with_file("---\nstatus: done\n---\n", self.TEMPLATE)
        assert result.merged["status"] == String("done")
        assert result.conflicts == ["status"]

    def test_file_without_frontmatter(self) -> None:
        result = merge_with_file("Just text\n", "a: 1")
        assert result.merged == {"a": Number(1)}
        assert result.conflicts == []
        assert result.added == ["a"]


class TestApplyToFile:
    def test_prepends_block(self) -> None:
        assert apply_to_file("Body\n", "a: 1\n") == "---\na: 1\n---\nBody\n"

    def test_replaces_block_and_collapses_gap(self) -> None:
        assert apply_to_file("---\nold: 1\n---\n\n\nBody", "a: 1") == "---\na: 1\n---\nBody"

    def test_empty_file(self) -> None:
        assert apply_to_file("", "a: 1\n") == "---\na: 1\n---\n"


class TestValidateFrontmatter:
    def test_text_is_valid(self) -> None:
        assert validate_frontmatter("anything: goes\n???") is True

    def test_non_string_is_invalid(self) -> None:
        assert validate_frontmatter(None) is False  # type: ignore[arg-type]


# One key per value kind.
EVERY_KIND = """\
nothing: null
blank:
quoted: ""
flag: true
count: 3
ratio: 0.5
title: Plan
tags:
  - a
  - b
nested: [a, [b, c]]
empty_list: []
note: |
  line one

  line three
"""


class TestMergeProperties:
    def test_self_merge_is_identity_for_every_kind(self) -> None:
        result = merge_frontmatter(EVERY_KIND, EVERY_KIND)
        assert result.merged == parse(EVERY_KIND)
        assert result.conflicts == list(parse(EVERY_KIND))
        assert result.added == []

    @pytest.mark.parametrize(
        "text",
        [
            "k: null",
            "k:",
            'k: ""',
            "k: false",
            "k: -2",
            "k: plain",
            "k: [x, y]",
            "k: [[x], [y]]",
            "k: []",
            "k: |\n  one\n  two",
        ],
    )
    def test_self_merge_is_identity_per_kind(self, text: str) -> None:
        result = merge_frontmatter(text, text)
        assert result.merged == parse(text)
        assert result.conflicts == ["k"]

    @pytest.mark.parametrize(
        ("base", "incoming", "expected"),
        [
            ("k: 1", "k: two", String("two")),
            ("k: true", "k: 3", Number(3)),
            ("k: old", "k: null", NULL),
            ("k: old", "k:", EMPTY),
            ("k: 5", 'k: ""', String("")),
            ("k: [a]", "k: text", String("text")),
            ("k: text", "k: [a]", List((String("a"),))),
            ("k: |\n  one\n  two", "k: single", String("single")),
            ("k: single", "k: |\n  one\n  two", String("one\ntwo")),
            ("k: false", "k: true", Bool(True)),
        ],
    )
    def test_incoming_wins_unless_both_array_like(self, base: str, incoming: str, expected: Value) -> None:
        result = merge_frontmatter(base, incoming)
        assert result.merged == {"k": expected}
        assert result.conflicts == ["k"]

    @pytest.mark.parametrize(
        ("base", "incoming", "expected"),
        [
            ("k: [a, b]", "k: [b, c]", _strings("a", "b", "c")),
            ("k: [x, x]", "k: [x]", _strings("x")),
            ("k: null", "k: [a]", _strings("a")),
            ("k:", "k: [a]", _strings("a")),
            ('k: ""', "k: [a]", _strings("a")),
            ("k: [a]", "k: null", _strings("a")),
            ("k: [a]", "k:", _strings("a")),
            ("k: [[x, y], a]", "k: [[x, y], b]", List((_strings("x", "y"), String("a"), String("b")))),
            ('k: [1, "1"]', "k: [1]", List((Number(1), String("1")))),
            ("k: []", "k: []", List(())),
            ("k: null", "k:", EMPTY),
            ("k: null", "k: null", NULL),
        ],
    )
    def test_array_like_values_concatenate(self, base: str, incoming: str, expected: Value) -> None:
        assert merge_frontmatter(base, incoming).merged == {"k": expected}

    def test_base_only_keys_keep_position_for_every_kind(self) -> None:
        result = merge_frontmatter(EVERY_KIND, "extra: 1")
        assert list(result.merged) == [*parse(EVERY_KIND), "extra"]
        assert result.added == ["extra"]
        assert result.conflicts == []
