"""
Section renderers shared by the markdown dialects.

Each section variant has one renderer. A dialect declares which variants it
cannot express; those are reported on the ConversionReport and left out of
the output, never raised.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple, Type

from .classifier import PRIORITY_MARKER
from .models import (
    CanonicalPackage,
    ContextSection,
    CustomSection,
    Example,
    ExamplesSection,
    InstructionsSection,
    MetadataSection,
    PersonaSection,
    Rule,
    RulesSection,
    Section,
    ToolsSection,
)
from .scoring import ConversionReport

logger = logging.getLogger(__name__)

RE_BACKTICK_RUN = re.compile(r"^[ \t]*(`{3,})", re.MULTILINE)


@dataclass(frozen=True)
class DialectProfile:
    key: str
    display_name: str
    unsupported: FrozenSet[str] = frozenset({"tools", "hook"})
    # Variants carried by the header instead of the body.
    header_only: FrozenSet[str] = frozenset()


# =============================================================================
# PER-VARIANT RENDERERS
# =============================================================================


def render_rule(rule: Rule, number: Optional[int] = None) -> str:
    marker = f"{number}." if number is not None else "-"
    indent = " " * (len(marker) + 1)
    lines = [f"{marker} {rule.content}"]
    if rule.rationale:
        lines.append(f"{indent}*{rule.rationale}*")
    for example in rule.examples:
        lines.append(f"{indent}Example: `{example}`")
    return "\n".join(lines)


def render_rules(section: RulesSection) -> str:
    items = [
        render_rule(rule, i if section.ordered else None)
        for i, rule in enumerate(section.items, start=1)
    ]
    return f"## {section.title}\n\n" + "\n".join(items)


def example_heading(example: Example) -> str:
    if example.good is True:
        return f"✓ {example.description}"
    if example.good is False:
        return f"❌ {example.description}"
    return example.description


def code_fence(code: str) -> str:
    """Backtick fence one longer than any backtick run that starts a line of ``code``."""
    runs = [len(m.group(1)) for m in RE_BACKTICK_RUN.finditer(code)]
    return "`" * max([3] + [n + 1 for n in runs])


def render_example(example: Example) -> str:
    fence = code_fence(example.code)
    return f"### {example_heading(example)}\n\n{fence}{example.language or ''}\n{example.code}\n{fence}"


def render_examples(section: ExamplesSection) -> str:
    parts = [f"## {section.title}"]
    parts.extend(render_example(example) for example in section.examples)
    return "\n\n".join(parts)


def render_persona(section: PersonaSection) -> str:
    if section.name and section.role:
        opening = f"You are {section.name}, {section.role}."
    else:
        opening = f"You are {section.role or section.name}."
    parts = [opening]
    if section.style:
        parts.append(f"Your communication style is {', '.join(section.style)}.")
    if section.expertise:
        parts.append("Areas of expertise:\n" + "\n".join(f"- {item}" for item in section.expertise))
    return "\n\n".join(parts)


def render_instructions(section: InstructionsSection) -> str:
    content = section.content
    if section.priority == "high":
        content = f"{PRIORITY_MARKER}\n\n{content}"
    return f"## {section.title}\n\n{content}".rstrip()


def render_context(section: ContextSection) -> str:
    return f"## {section.title}\n\n{section.content}".rstrip()


def render_custom(section: CustomSection) -> str:
    if section.title:
        return f"## {section.title}\n\n{section.content}".rstrip()
    return section.content.rstrip()


RENDERERS: Dict[Type, Callable] = {
    InstructionsSection: render_instructions,
    RulesSection: render_rules,
    ExamplesSection: render_examples,
    PersonaSection: render_persona,
    ContextSection: render_context,
    CustomSection: render_custom,
}


def render_section(section: Section, profile: DialectProfile, report: ConversionReport) -> Optional[str]:
    """Render one section for ``profile`` or record why it was left out."""
    if isinstance(section, MetadataSection) or section.type in profile.header_only:
        return None
    if isinstance(section, CustomSection):
        if section.editor_type and section.editor_type != profile.key:
            report.warn(f"Custom {section.editor_type} section skipped")
            return None
    renderer = RENDERERS.get(type(section))
    if renderer is None or section.type in profile.unsupported:
        report.warn(f"{section.type.title()} section skipped (not supported by {profile.display_name})")
        logger.debug("Skipped %s section for %s", section.type, profile.key)
        return None
    return renderer(section)


# =============================================================================
# DOCUMENT
# =============================================================================


def render_heading(pkg: CanonicalPackage) -> Optional[str]:
    meta = pkg.metadata_section
    title = meta.title if meta and meta.title else pkg.name
    if not title:
        return None
    icon = meta.icon if meta else None
    return f"# {icon} {title}" if icon else f"# {title}"


def report_foreign_fields(pkg: CanonicalPackage, profile: DialectProfile, report: ConversionReport) -> None:
    """Warn about header keys another dialect carried that this one cannot write."""
    meta = pkg.metadata_section
    if meta is None:
        return
    for ext in meta.extensions:
        extra = getattr(ext, "extra", None)
        if not extra or ext.dialect == profile.key:
            continue
        for key in extra:
            report.warn(f"{ext.dialect} field '{key}' not supported by {profile.display_name}")


def render_markdown(
    pkg: CanonicalPackage,
    profile: DialectProfile,
    report: ConversionReport,
    description_in_body: bool = False,
    include_heading: bool = True,
) -> str:
    """
    Render the package body as markdown.

    Persona sections are hoisted to the preamble so the parser reads them
    back as persona. ``description_in_body`` writes the description as the
    first paragraph, for dialects that have no header to carry it.
    """
    report_foreign_fields(pkg, profile, report)
    parts: List[str] = []
    if include_heading:
        heading = render_heading(pkg)
        if heading:
            parts.append(heading)
    if description_in_body and pkg.description:
        parts.append(pkg.description)

    body = pkg.content.body
    personas = [s for s in body if isinstance(s, PersonaSection)]
    others = [s for s in body if not isinstance(s, PersonaSection)]
    for section in personas + others:
        rendered = render_section(section, profile, report)
        if rendered:
            parts.append(rendered)

    return "\n\n".join(parts).strip() + "\n"


def plain_text(pkg: CanonicalPackage, profile: DialectProfile, report: ConversionReport) -> str:
    """Body text without a heading, used for prompt strings inside TOML/JSON."""
    return render_markdown(pkg, profile, report, include_heading=False).strip()


def with_header(header: str, body: str) -> str:
    """Join a rendered ``---`` block and a markdown body."""
    if not header:
        return body
    return f"{header}\n{body.strip()}\n"


def collect_tools(pkg: CanonicalPackage) -> Tuple[str, ...]:
    """All tool names from the package's tools sections, in order."""
    tools: List[str] = []
    for section in pkg.content.body:
        if isinstance(section, ToolsSection):
            for tool in section.tools:
                if tool not in tools:
                    tools.append(tool)
    return tuple(tools)
