"""Tests for the per-dialect parsers and serializers."""

import json
import tomllib
from dataclasses import replace

import pytest

from prompt_bridge.converters import (
    from_agents_md,
    from_aider,
    from_canonical,
    from_claude,
    from_continue,
    from_copilot,
    from_cursor,
    from_droid,
    from_gemini,
    from_kiro,
    from_kiro_agent,
    from_opencode,
    from_trae,
    from_windsurf,
    from_zencoder,
    to_agents_md,
    to_aider,
    to_canonical_json,
    to_claude,
    to_continue,
    to_copilot,
    to_cursor,
    to_droid,
    to_gemini,
    to_kiro,
    to_kiro_agent,
    to_opencode,
    to_trae,
    to_windsurf,
    to_zencoder,
)
from prompt_bridge.converters.claude import detect_subtype
from prompt_bridge.converters.kiro import infer_tags
from prompt_bridge.core.converter import converter_registry
from prompt_bridge.errors import MissingRequiredField, ParseError
from prompt_bridge.frontmatter import extract
from prompt_bridge.models import (
    CanonicalContent,
    ClaudeExtension,
    ContextSection,
    ConversionOptions,
    CursorExtension,
    CustomSection,
    ExamplesSection,
    InstructionsSection,
    KiroExtension,
    OpenCodeExtension,
    PackageMetadata,
    PersonaSection,
    RulesSection,
    Subtype,
    ToolsSection,
    ZencoderExtension,
)


# =============================================================================
# CLAUDE
# =============================================================================


def test_from_claude_sections(claude_package):
    """Verify sections are typed in source order, tools last."""
    body = claude_package.content.body

    assert [type(s) for s in body] == [
        PersonaSection,
        RulesSection,
        ExamplesSection,
        ContextSection,
        ToolsSection,
    ]
    assert body[-1].tools == ("Read", "Grep", "Bash")


def test_from_claude_metadata(claude_package):
    meta = claude_package.metadata_section

    assert claude_package.name == "code-review"
    assert claude_package.description == "Review pull requests for correctness and style"
    assert meta.title == "Code Review"
    assert meta.icon == "🔍"
    assert meta.extension(ClaudeExtension) == ClaudeExtension(model="sonnet")
    assert claude_package.metadata["claude"] == {"model": "sonnet"}


def test_from_claude_persona(claude_package):
    persona = claude_package.content.body[0]

    assert persona.name == "Rex"
    assert persona.role == "meticulous senior reviewer"
    assert persona.style == ("direct", "concise")
    assert persona.expertise == ("Python", "API design")


def test_from_claude_rules_and_examples(claude_package):
    rules = claude_package.content.body[1]
    examples = claude_package.content.body[2]

    assert rules.items[0].rationale == "Small functions are easier to test"
    assert rules.items[1].examples == ("user_count",)
    assert [(e.description, e.good) for e in examples.examples] == [
        ("Early return", True),
        ("Deep nesting", False),
    ]


def test_to_claude_header(claude_package):
    result = to_claude(claude_package)
    header, _ = extract(result.content)

    assert header.data == {
        "name": "code-review",
        "description": "Review pull requests for correctness and style",
        "tools": "Read, Grep, Bash",
        "model": "sonnet",
    }
    assert result.content.count("\n## ") == 3
    assert result.quality_score == 100
    assert result.warnings == ()


def test_to_claude_slash_command_header(metadata):
    content = "---\ndescription: Fix an issue\nallowed-tools: Bash(git:*)\nargument-hint: <issue-number>\n---\n\nFix issue $ARGUMENTS.\n"

    pkg = from_claude(content, metadata, subtype=Subtype.SLASH_COMMAND)
    header, _ = extract(to_claude(pkg).content)

    assert list(header.data) == ["description", "allowed-tools", "argument-hint"]
    assert header.data["argument-hint"] == "<issue-number>"


def test_detect_subtype():
    assert detect_subtype({"type": "skill"}) is Subtype.SKILL
    assert detect_subtype({"agentType": "reviewer"}) is Subtype.AGENT
    assert detect_subtype({"commandType": True}) is Subtype.SLASH_COMMAND
    assert detect_subtype({}) is Subtype.RULE


def test_claude_output_paths(claude_package):
    converter = converter_registry.get("claude")

    assert converter.output_path(replace(claude_package, subtype=Subtype.SKILL)) == ".claude/skills/code-review/SKILL.md"
    assert converter.output_path(replace(claude_package, subtype=Subtype.AGENT)) == ".claude/agents/code-review.md"


def test_custom_section_for_other_editor_is_skipped(claude_package):
    sections = claude_package.content.sections + (CustomSection("Use Composer.", editor_type="cursor"),)
    pkg = replace(claude_package, content=CanonicalContent(sections))

    assert "Custom cursor section skipped" in to_claude(pkg).warnings
    assert "Use Composer." in to_cursor(pkg).content


# =============================================================================
# CURSOR
# =============================================================================


CURSOR_RULE = """---
description: React component conventions
globs: src/components/**/*.tsx
alwaysApply: false
---

# React Components

- Use function components
"""


def test_from_cursor(metadata):
    pkg = from_cursor(CURSOR_RULE, metadata)
    extension = pkg.metadata_section.extension(CursorExtension)

    assert pkg.description == "React component conventions"
    assert extension.globs == ("src/components/**/*.tsx",)
    assert extension.always_apply is False


def test_to_cursor_defaults_always_apply_without_globs(standards_body, standards_metadata):
    pkg = from_windsurf(standards_body, standards_metadata)
    header, _ = extract(to_cursor(pkg).content)

    assert header.data == {"description": "Testing Standards", "alwaysApply": True}


def test_to_cursor_options_override(metadata):
    pkg = from_cursor(CURSOR_RULE, metadata)
    result = to_cursor(pkg, ConversionOptions(cursor_globs=["app/**/*.ts", "lib/**"], always_apply=True))
    header, _ = extract(result.content)

    assert header.data["globs"] == "app/**/*.ts,lib/**"
    assert header.data["alwaysApply"] is True


def test_to_cursor_drops_tools(claude_package):
    result = to_cursor(claude_package)

    assert "Tools section skipped (not supported by Cursor)" in result.warnings
    assert result.lossy_conversion is True
    assert result.quality_score == 90


def test_to_cursor_slash_command_is_plain_markdown(metadata):
    pkg = from_claude("---\ndescription: Deploy\n---\n\nDeploy the app.\n", metadata, subtype=Subtype.SLASH_COMMAND)
    result = to_cursor(pkg)

    assert not result.content.startswith("---")
    assert converter_registry.get("cursor").output_path(pkg) == ".cursor/commands/code-review.md"


# =============================================================================
# CONTINUE
# =============================================================================


def test_from_continue_prompt(metadata):
    content = "---\nname: explain\ndescription: Explain the selection\ninvokable: true\n---\n\nExplain the code.\n"

    pkg = from_continue(content, metadata)

    assert pkg.name == "explain"
    assert pkg.subtype is Subtype.PROMPT


def test_to_continue_rule_header(metadata):
    pkg = from_cursor(CURSOR_RULE, metadata)
    result = to_continue(pkg, ConversionOptions(cursor_globs=["src/**"]))
    header, _ = extract(result.content)

    assert header.data == {
        "name": "code-review",
        "description": "React component conventions",
        "globs": ["src/**"],
    }


def test_to_continue_skips_persona(claude_package):
    result = to_continue(claude_package)

    assert "Persona section skipped (not supported by Continue)" in result.warnings


# =============================================================================
# WINDSURF & AGENTS.md
# =============================================================================


def test_windsurf_description_in_body(standards_metadata):
    content = "# Testing Standards\n\nTeam testing standards\n\n## Rules\n\n- Test everything\n"

    pkg = from_windsurf(content, standards_metadata)
    result = to_windsurf(pkg)

    assert pkg.description == "Team testing standards"
    assert result.content == content


def test_agents_md(standards_metadata):
    content = "# Acme API\n\nInstructions for agents working on the Acme API.\n\n## Commands\n\n- Run `make test` before committing\n"

    pkg = from_agents_md(content, standards_metadata)

    assert pkg.description == "Instructions for agents working on the Acme API."
    assert pkg.metadata["agentsMd"] == {"project": "Acme API"}
    assert to_agents_md(pkg).content == content
    assert converter_registry.get("agents.md").output_path(pkg) == "AGENTS.md"


# =============================================================================
# COPILOT
# =============================================================================


def test_copilot_path_specific(standards_metadata):
    content = '---\napplyTo: "**/*.py"\n---\n\n# Python\n\nPython conventions\n\n## Rules\n\n- Use type hints\n'

    pkg = from_copilot(content, standards_metadata)
    result = to_copilot(pkg)
    header, _ = extract(result.content)

    assert pkg.description == "Python conventions"
    assert header.data == {"applyTo": "**/*.py"}
    assert converter_registry.get("copilot").output_path(pkg) == ".github/instructions/testing-standards.instructions.md"


def test_copilot_repository_wide(standards_body, standards_metadata):
    pkg = from_copilot(standards_body, standards_metadata)
    result = to_copilot(pkg)

    assert not result.content.startswith("---")
    assert converter_registry.get("copilot").output_path(pkg) == ".github/copilot-instructions.md"


# =============================================================================
# KIRO
# =============================================================================


def test_from_kiro_requires_inclusion():
    with pytest.raises(MissingRequiredField) as excinfo:
        from_kiro("---\ndomain: api\n---\n\n# API\n", PackageMetadata(id="api"))

    assert excinfo.value.field == "inclusion"


def test_from_kiro_requires_header():
    with pytest.raises(MissingRequiredField):
        from_kiro("# API\n", PackageMetadata(id="api"))


def test_from_kiro_file_match_requires_pattern():
    with pytest.raises(MissingRequiredField) as excinfo:
        from_kiro("---\ninclusion: fileMatch\n---\n\n# API\n", PackageMetadata(id="api"))

    assert excinfo.value.field == "fileMatchPattern"


def test_from_kiro_foundational_file():
    content = "---\ninclusion: always\n---\n\n# Tech Stack\n\nLanguages and frameworks in use.\n"

    pkg = from_kiro(content, PackageMetadata(id="tech"))
    extension = pkg.metadata_section.extension(KiroExtension)

    assert extension.foundational_type == "tech"
    assert pkg.description == "Languages and frameworks in use."
    assert {"kiro-tech", "kiro-always"} <= pkg.tags


def test_infer_tags():
    assert infer_tags("fileMatch", "src/api/**/*.ts", None) == ["kiro-fileMatch", "api"]


def test_to_kiro_defaults_inclusion(standards_body, standards_metadata):
    pkg = from_windsurf(standards_body, standards_metadata)
    result = to_kiro(pkg)
    header, _ = extract(result.content)

    assert header.data == {"inclusion": "always"}
    assert "No inclusion mode set, defaulting to 'always'" in result.warnings
    assert result.lossy_conversion is False


def test_to_kiro_options(standards_body, standards_metadata):
    pkg = from_windsurf(standards_body, standards_metadata)
    options = ConversionOptions(kiro_inclusion="fileMatch", kiro_file_match_pattern="tests/**/*.py")
    header, _ = extract(to_kiro(pkg, options).content)

    assert header.data == {"inclusion": "fileMatch", "fileMatchPattern": "tests/**/*.py"}


# =============================================================================
# KIRO AGENT
# =============================================================================


def test_from_kiro_agent():
    config = {
        "name": "reviewer",
        "description": "Reviews code",
        "prompt": "## Rules\n\n- Be kind",
        "tools": ["read", "grep"],
        "model": "claude-sonnet-4",
    }

    pkg = from_kiro_agent(json.dumps(config), PackageMetadata(id="x"))

    assert pkg.name == "reviewer"
    assert pkg.subtype is Subtype.AGENT
    assert pkg.source_format == "kiro-agent"
    assert pkg.content.body[-1] == ToolsSection(("read", "grep"))


def test_from_kiro_agent_file_prompt():
    pkg = from_kiro_agent('{"name": "a", "prompt": "file://./prompts/a.md"}', PackageMetadata(id="a"))

    assert pkg.content.body == (InstructionsSection("Instructions", "Loads instructions from: file://./prompts/a.md"),)


def test_from_kiro_agent_invalid_json():
    with pytest.raises(ParseError):
        from_kiro_agent("{not json", PackageMetadata(id="a"))
    with pytest.raises(ParseError):
        from_kiro_agent("[]", PackageMetadata(id="a"))


def test_to_kiro_agent_slash_command_incompatible(metadata):
    pkg = from_claude("---\ndescription: Deploy\n---\n\nDeploy the app.\n", metadata, subtype=Subtype.SLASH_COMMAND)
    result = to_kiro_agent(pkg)

    assert "Slash commands are not supported by Kiro agents" in result.warnings
    assert result.quality_score == 70
    assert json.loads(result.content)["name"] == "code-review"


def test_to_kiro_agent_skill_partial(claude_package):
    result = to_kiro_agent(replace(claude_package, subtype=Subtype.SKILL))
    config = json.loads(result.content)

    assert config["tools"] == ["Read", "Grep", "Bash"]
    assert result.quality_score == 90


# =============================================================================
# GEMINI
# =============================================================================


def test_from_gemini_requires_prompt(metadata):
    with pytest.raises(MissingRequiredField):
        from_gemini('description = "x"\n', metadata)


def test_gemini_round_trip(metadata):
    content = 'description = "Write tests"\nprompt = """\n## Rules\n\n- Cover edge cases\n"""\n'

    pkg = from_gemini(content, metadata)
    data = tomllib.loads(to_gemini(pkg).content)

    assert pkg.subtype is Subtype.SLASH_COMMAND
    assert data == {"description": "Write tests", "prompt": "## Rules\n\n- Cover edge cases"}


def test_to_gemini_skips_tools(claude_package):
    result = to_gemini(claude_package)

    assert "Tools section skipped (not supported by Gemini)" in result.warnings


# =============================================================================
# DROID
# =============================================================================


def test_from_droid_command(metadata):
    content = "---\nname: deploy\ndescription: Deploy a service\nargument-hint: <service>\nallowed-tools:\n- Bash\n---\n\nDeploy $ARGUMENTS.\n"

    pkg = from_droid(content, metadata)

    assert pkg.subtype is Subtype.SLASH_COMMAND
    assert pkg.content.body[-1] == ToolsSection(("Bash",))
    assert converter_registry.get("droid").output_path(pkg) == ".factory/commands/deploy.md"


def test_to_droid_folds_tools(claude_package):
    header, body = extract(to_droid(claude_package).content)

    assert header.data["name"] == "Code Review"
    assert header.data["allowed-tools"] == ["Read", "Grep", "Bash"]
    assert not body.lstrip().startswith("# ")


# =============================================================================
# OPENCODE
# =============================================================================


def test_opencode_agent(metadata):
    content = "---\ndescription: Plans work\nmode: primary\ntemperature: 0.1\ntools:\n  write: false\n  read: true\n---\n\n# Planner\n"

    pkg = from_opencode(content, metadata)
    extension = pkg.metadata_section.extension(OpenCodeExtension)
    header, _ = extract(to_opencode(pkg).content)

    assert pkg.subtype is Subtype.AGENT
    assert pkg.content.body == (ToolsSection(("read",)),)
    assert extension.tools == {"write": False, "read": True}
    assert header.data == {
        "description": "Plans work",
        "mode": "primary",
        "temperature": 0.1,
        "tools": {"write": False, "read": True},
    }


def test_opencode_command(metadata):
    content = "---\ndescription: Run the tests\nagent: build\nsubtask: true\n---\n\nRun the full suite.\n"

    pkg = from_opencode(content, metadata)
    header, _ = extract(to_opencode(pkg).content)

    assert pkg.subtype is Subtype.SLASH_COMMAND
    assert header.data == {"description": "Run the tests", "agent": "build", "subtask": True}
    assert converter_registry.get("opencode").output_path(pkg) == ".opencode/commands/code-review.md"


def test_to_opencode_default_mode(claude_package):
    header, _ = extract(to_opencode(claude_package).content)

    assert header.data["mode"] == "subagent"
    assert header.data["tools"] == {"Read": True, "Grep": True, "Bash": True}


# =============================================================================
# DIALECT-ONLY HEADER FIELDS
# =============================================================================

CLAUDE_WITH_EXTRAS = (
    "---\nname: rev\ndescription: Reviews\ncolor: blue\npermissionMode: plan\n---\n\n# Rev\n\n## Rules\n\n- Be kind\n"
)


def test_claude_keeps_unknown_header_fields(metadata):
    pkg = from_claude(CLAUDE_WITH_EXTRAS, metadata)
    result = to_claude(pkg)
    header, _ = extract(result.content)

    assert pkg.metadata["claude"] == {"extra": {"color": "blue", "permissionMode": "plan"}}
    assert header.data == {"name": "rev", "description": "Reviews", "color": "blue", "permissionMode": "plan"}
    assert result.warnings == ()
    assert result.quality_score == 100


def test_unknown_header_fields_are_reported_by_other_dialects(metadata):
    result = to_cursor(from_claude(CLAUDE_WITH_EXTRAS, metadata))
    header, _ = extract(result.content)

    assert "claude field 'color' not supported by Cursor" in result.warnings
    assert "claude field 'permissionMode' not supported by Cursor" in result.warnings
    assert "color" not in header.data
    assert result.lossy_conversion is True
    assert result.quality_score == 90


def test_unknown_header_fields_survive_canonical_json(metadata):
    pkg = from_canonical(to_canonical_json(from_claude(CLAUDE_WITH_EXTRAS, metadata)))
    header, _ = extract(to_claude(pkg).content)

    assert header.data["color"] == "blue"
    assert header.data["permissionMode"] == "plan"


def test_cursor_keeps_unknown_header_fields(metadata):
    content = "---\ndescription: Style\nglobs: src/**\nalwaysApply: false\nname: legacy-style\n---\n\n# Style\n"

    header, _ = extract(to_cursor(from_cursor(content, metadata)).content)

    assert header.data == {"description": "Style", "globs": "src/**", "alwaysApply": False, "name": "legacy-style"}


def test_droid_keeps_unknown_header_fields(metadata):
    content = "---\nname: deploy\ndescription: Deploy\nmodel: gpt-5\n---\n\nDeploy the app.\n"

    header, _ = extract(to_droid(from_droid(content, metadata)).content)

    assert header.data == {"name": "deploy", "description": "Deploy", "model": "gpt-5"}


@pytest.mark.parametrize(
    "config, field",
    [
        ({"name": "x", "prompt": ["a"]}, "prompt"),
        ({"name": "x", "description": {"text": "d"}}, "description"),
        ({"name": "x", "tools": "read"}, "tools"),
        ({"name": 7}, "name"),
    ],
)
def test_from_kiro_agent_rejects_mistyped_fields(config, field):
    with pytest.raises(ParseError, match=f"'{field}' must be"):
        from_kiro_agent(json.dumps(config), PackageMetadata(id="x"))


# =============================================================================
# RENDERING DETAILS
# =============================================================================


def test_high_priority_instructions_round_trip(metadata):
    content = "# Deploy\n\n## Release\n\n**Important:**\n\nTag before you push.\n"

    pkg = from_windsurf(content, metadata)

    assert pkg.content.body == (InstructionsSection("Release", "Tag before you push.", "high"),)
    assert to_windsurf(pkg).content == content


def test_example_code_containing_fences_round_trip(metadata):
    content = "# Docs\n\n## Examples\n\n### Markdown\n\n````md\n```js\nx()\n```\n````\n"

    pkg = from_windsurf(content, metadata)

    assert pkg.content.body[0].examples[0].code == "```js\nx()\n```"
    assert to_windsurf(pkg).content == content


# =============================================================================
# AIDER, TRAE & ZENCODER
# =============================================================================

AIDER_CONVENTIONS = (
    "# Acme Conventions\n\nHow we write Python for the Acme API.\n\n## Rules\n\n- Use type hints\n- Prefer dataclasses\n"
)


def test_aider_round_trip(standards_metadata):
    pkg = from_aider(AIDER_CONVENTIONS, standards_metadata)
    result = to_aider(pkg)

    assert pkg.description == "How we write Python for the Acme API."
    assert pkg.tags == frozenset({"aider", "python", "api"})
    assert pkg.source_format == "aider"
    assert result.content == AIDER_CONVENTIONS
    assert result.quality_score == 100
    assert converter_registry.get("aider").output_path(pkg) == "CONVENTIONS.md"


def test_to_aider_skips_persona_and_tools(claude_package):
    result = to_aider(claude_package)

    assert "Persona section skipped (not supported by Aider)" in result.warnings
    assert "Tools section skipped (not supported by Aider)" in result.warnings
    assert result.quality_score == 90
    assert "\n\nReview pull requests for correctness and style\n\n" in result.content


def test_trae_round_trip(standards_metadata):
    content = "# Frontend Rules\n\nRules for the web client.\n\n## Rules\n\n1. Use function components\n2. Keep state local\n"

    pkg = from_trae(content, standards_metadata)

    assert pkg.content.body[0].ordered is True
    assert to_trae(pkg).content == content
    assert converter_registry.get("trae").output_path(pkg) == ".trae/rules/testing-standards.md"


def test_to_trae_skips_persona(claude_package):
    result = to_trae(claude_package)

    assert "Persona section skipped (not supported by Trae)" in result.warnings
    assert "You are" not in result.content


def test_zencoder_scoped_rule(standards_metadata):
    content = "---\ndescription: API rules\nglobs:\n- src/api/**\nalwaysApply: false\n---\n\n# API\n\n## Rules\n\n- Validate input\n"

    pkg = from_zencoder(content, standards_metadata)

    assert pkg.description == "API rules"
    assert pkg.metadata_section.extension(ZencoderExtension) == ZencoderExtension(
        globs=("src/api/**",), always_apply=False
    )
    assert to_zencoder(pkg).content == content


def test_zencoder_unscoped_rule_has_no_header(standards_metadata):
    content = "# API\n\nAPI rules\n\n## Rules\n\n- Validate input\n"

    pkg = from_zencoder(content, standards_metadata)

    assert pkg.description == "API rules"
    assert to_zencoder(pkg).content == content


def test_to_zencoder_options_add_header(claude_package):
    result = to_zencoder(claude_package, ConversionOptions(cursor_globs=["**/*.py"]))
    header, body = extract(result.content)

    assert header.data == {"description": "Review pull requests for correctness and style", "globs": ["**/*.py"]}
    assert "Review pull requests" not in body
    assert "Persona section skipped (not supported by Zencoder)" in result.warnings
