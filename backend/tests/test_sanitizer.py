"""Request body sanitization tests."""

import copy

import pytest

from staff_api.services.sanitizer import sanitize_payload, sanitize_string


class TestSanitizeString:
    """Tests for single string cleaning."""

    def test_removes_script_block(self) -> None:
        assert sanitize_string("Ann<script>alert('x')</script>") == "Ann"

    def test_removes_script_block_case_insensitive(self) -> None:
        assert sanitize_string("<SCRIPT type='text/javascript'>steal()</SCRIPT>Bob") == "Bob"

    def test_removes_javascript_scheme(self) -> None:
        assert sanitize_string("JavaScript:alert(1)") == "alert(1)"

    def test_removes_event_handlers(self) -> None:
        assert sanitize_string('<img src=x onerror=alert(1)>') == "<img src=x alert(1)>"
        assert sanitize_string("onclick = run()") == "run()"

    def test_trims_whitespace(self) -> None:
        assert sanitize_string("   Engineering  ") == "Engineering"

    def test_nested_fragments_cannot_reassemble(self) -> None:
        # Removing the inner scheme would otherwise join a new one
        assert "javascript:" not in sanitize_string("javajavascript:script:alert(1)").lower()

    def test_plain_text_unchanged(self) -> None:
        assert sanitize_string("O'Brien-Smith") == "O'Brien-Smith"


class TestSanitizePayload:
    """Tests for whole-body sanitization."""

    def test_nested_strings_cleaned(self) -> None:
        body = {
            "personalInfo": {
                "firstName": "  Eve<script>x()</script> ",
                "address": {"city": "javascript:Paris"},
            },
            "jobInfo": {"title": "Dev onload=evil()", "salary": 50000},
            "tags": ["  a ", {"note": "<script>1</script>ok"}],
        }

        result = sanitize_payload(body)

        assert result["personalInfo"]["firstName"] == "Eve"
        assert result["personalInfo"]["address"]["city"] == "Paris"
        assert result["jobInfo"]["title"] == "Dev evil()"
        assert result["jobInfo"]["salary"] == 50000
        assert result["tags"] == ["a", {"note": "ok"}]

    def test_input_not_mutated(self) -> None:
        body = {"personalInfo": {"firstName": " <script>x</script>Eve "}}
        original = copy.deepcopy(body)

        sanitize_payload(body)

        assert body == original

    def test_idempotent(self) -> None:
        body = {
            "a": "<scr<script>x</script>ipt>alert(1)</script>",
            "b": ["javascript:javascript:go", " onmouseover=1 "],
            "c": {"d": None, "e": True, "f": 1.5},
        }

        once = sanitize_payload(body)

        assert sanitize_payload(once) == once

    @pytest.mark.parametrize("value", [None, 42, 3.5, True, "<script>x</script>"])
    def test_non_container_returned_unchanged(self, value) -> None:
        assert sanitize_payload(value) is value

    def test_non_string_leaves_pass_through(self) -> None:
        body = {"n": None, "i": 7, "b": False}
        assert sanitize_payload(body) == body
