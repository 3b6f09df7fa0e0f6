"""Tests for URI template tokenizing, compilation and projection."""

from __future__ import annotations

import dataclasses

import pytest

from dispatch_criteria import (
    MAX_TEMPLATE_LENGTH,
    DispatchError,
    LiteralRun,
    Placeholder,
    TemplateTooLongError,
    UriTemplate,
    compile_template,
    extract_from_uri_pattern,
    extract_parts_from_uri_pattern,
)


class TestTokenize:
    def test_literal_and_placeholders(self) -> None:
        t = UriTemplate("/a/{x}/b/{y}")
        assert t.segments == (
            LiteralRun("/a/"),
            Placeholder("x"),
            LiteralRun("/b/"),
            Placeholder("y"),
        )

    def test_leading_placeholder(self) -> None:
        assert UriTemplate("{x}/a").segments == (Placeholder("x"), LiteralRun("/a"))

    def test_adjacent_placeholders(self) -> None:
        assert UriTemplate("{x}{y}").segments == (Placeholder("x"), Placeholder("y"))

    def test_empty_braces_are_literal(self) -> None:
        assert UriTemplate("/a/{}/{x}").segments == (LiteralRun("/a/{}/"), Placeholder("x"))

    def test_unclosed_brace_is_literal(self) -> None:
        assert UriTemplate("/a/{x").segments == (LiteralRun("/a/{x"),)

    def test_name_runs_to_first_closing_brace(self) -> None:
        assert UriTemplate("/{a{b}").names == ("a{b",)

    def test_empty_template(self) -> None:
        t = UriTemplate("")
        assert t.segments == ()
        assert t.names == ()


class TestUriTemplate:
    def test_names_in_template_order(self) -> None:
        assert UriTemplate("/v/{y}/{x}").names == ("y", "x")

    def test_prefix(self) -> None:
        assert UriTemplate("/pets/{id}/photos").prefix == "/pets/"

    def test_prefix_without_placeholders(self) -> None:
        assert UriTemplate("/pets").prefix == "/pets"

    def test_prefix_with_leading_placeholder(self) -> None:
        assert UriTemplate("{id}/photos").prefix == ""

    def test_match(self) -> None:
        assert UriTemplate("/pets/{kind}/{id}").match("/pets/cat/42") == {
            "kind": "cat",
            "id": "42",
        }

    def test_match_is_whole_uri(self) -> None:
        t = UriTemplate("/pets/{id}")
        assert t.match("/api/pets/1") is None
        assert t.match("/pets/1/") == {"id": "1/"}

    def test_no_match(self) -> None:
        assert UriTemplate("/pets/{id}").match("/owners/1") is None

    def test_match_without_placeholders(self) -> None:
        assert UriTemplate("/pets").match("/pets") == {}

    def test_regex_metacharacters_are_literal(self) -> None:
        t = UriTemplate("/a+b/(v1)/{x}?.*")
        assert t.match("/a+b/(v1)/7?.*") == {"x": "7"}
        assert t.match("/aab/v1/7?xx") is None

    def test_repeated_name_last_wins(self) -> None:
        assert UriTemplate("/{x}/{x}").match("/1/2") == {"x": "2"}

    def test_frozen(self) -> None:
        t = UriTemplate("/a/{x}")
        with pytest.raises(dataclasses.FrozenInstanceError):
            t.pattern = "/b"  # type: ignore[misc]

    def test_value_equality(self) -> None:
        assert UriTemplate("/a/{x}") == UriTemplate("/a/{x}")

    def test_too_long(self) -> None:
        with pytest.raises(TemplateTooLongError) as exc_info:
            UriTemplate("/" + "a" * MAX_TEMPLATE_LENGTH)
        assert exc_info.value.length == MAX_TEMPLATE_LENGTH + 1
        assert isinstance(exc_info.value, DispatchError)

    def test_at_limit(self) -> None:
        UriTemplate("a" * MAX_TEMPLATE_LENGTH)


class TestCompileTemplate:
    def test_cached(self) -> None:
        assert compile_template("/cached/{x}") is compile_template("/cached/{x}")

    def test_distinct_templates(self) -> None:
        assert compile_template("/c/{x}") is not compile_template("/c/{y}")


class TestExtractPartsFromUriPattern:
    def test_two_names(self) -> None:
        assert extract_parts_from_uri_pattern("/a/{x}/{y}") == "x && y"

    def test_no_placeholders(self) -> None:
        assert extract_parts_from_uri_pattern("/a/b") == ""

    def test_single_name(self) -> None:
        assert extract_parts_from_uri_pattern("/pets/{petId}") == "petId"


class TestExtractFromUriPattern:
    def test_sorted_by_name(self) -> None:
        assert extract_from_uri_pattern("/a/{x}/{y}", "/a/10/20") == "/x=10/y=20"

    def test_prefix_mismatch(self) -> None:
        assert extract_from_uri_pattern("/a/{x}", "/b/10") == ""

    def test_trailing_literal_mismatch(self) -> None:
        assert extract_from_uri_pattern("/a/{x}/photos", "/a/1/videos") == ""

    def test_placeholder_order_does_not_change_criteria(self) -> None:
        a = extract_from_uri_pattern("/r/{b}/{a}/{c}", "/r/2/1/3")
        b = extract_from_uri_pattern("/r/{a}/{b}/{c}", "/r/1/2/3")
        assert a == b == "/a=1/b=2/c=3"

    def test_idempotent(self) -> None:
        first = extract_from_uri_pattern("/a/{x}", "/a/1")
        assert extract_from_uri_pattern("/a/{x}", "/a/1") == first

    def test_values_are_not_decoded(self) -> None:
        assert extract_from_uri_pattern("/a/{x}", "/a/b%20c") == "/x=b%20c"

    def test_adjacent_placeholders_greedy(self) -> None:
        assert extract_from_uri_pattern("/{x}{y}", "/abc") == "/x=ab/y=c"

    def test_trailing_literal_after_greedy_value(self) -> None:
        assert extract_from_uri_pattern("/{x}.json", "/a.b.json") == "/x=a.b"
