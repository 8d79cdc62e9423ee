"""Tests for header extraction."""

import pytest

from prompt_bridge.errors import MalformedFrontmatter, MissingRequiredField, ParseError
from prompt_bridge.frontmatter import as_list, extract, render_yaml_header, require_header


def test_extract_yaml_header():
    """Verify dict + body returned."""
    content = "---\nname: test\ndescription: test desc\n---\n\n# Body\n\nContent"

    header, body = extract(content)

    assert header is not None
    assert header.kind == "yaml"
    assert header.data == {"name": "test", "description": "test desc"}
    assert header.get("name") == "test"
    assert body == "\n# Body\n\nContent"


def test_extract_without_header():
    """Verify content unchanged when there is no header."""
    content = "# Title\n\nNo frontmatter here"

    header, body = extract(content)

    assert header is None
    assert body == content


def test_extract_empty_header():
    header, body = extract("---\n---\nBody\n")

    assert header is not None
    assert header.data == {}
    assert body == "Body\n"


def test_malformed_yaml_fails_closed():
    """A broken header must raise, never fall back to body text."""
    with pytest.raises(MalformedFrontmatter) as excinfo:
        extract("---\nname: [unclosed\n---\nBody\n", dialect="cursor")

    assert isinstance(excinfo.value, ParseError)
    assert excinfo.value.dialect == "cursor"
    assert str(excinfo.value).startswith("[cursor] ")


def test_non_mapping_header_rejected():
    with pytest.raises(MalformedFrontmatter):
        extract("---\n- a\n- b\n---\nBody\n")


def test_extract_toml():
    header, body = extract('description = "Review"\nprompt = "Do it"\n', toml=True)

    assert header.kind == "toml"
    assert header.get("prompt") == "Do it"
    assert body == ""


def test_malformed_toml_fails_closed():
    with pytest.raises(MalformedFrontmatter):
        extract('prompt = "unterminated\n', toml=True, dialect="gemini")


def test_require_header():
    with pytest.raises(MissingRequiredField) as excinfo:
        require_header(None, "kiro")

    assert excinfo.value.field == "frontmatter"


def test_render_yaml_header_drops_none():
    header = render_yaml_header({"name": "x", "model": None, "alwaysApply": False})

    assert header == "---\nname: x\nalwaysApply: false\n---\n"


def test_render_yaml_header_empty():
    assert render_yaml_header({"model": None}) == ""


def test_as_list():
    assert as_list("Read, Grep,  Bash") == ("Read", "Grep", "Bash")
    assert as_list(["a", " b "]) == ("a", "b")
    assert as_list(None) == ()
    assert as_list("") == ()
