"""Shared markdown body parser used by every markdown-based dialect."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .classifier import (
    PRIORITY_MARKER,
    RE_BOLD_LABEL,
    SectionKind,
    classify,
    classify_preamble,
    is_fence,
    is_list_item,
    split_blocks,
    split_paragraphs,
)
from .extractors import is_persona_paragraph, parse_examples, parse_persona, parse_rules
from .models import ContextSection, InstructionsSection, Section

logger = logging.getLogger(__name__)

PREAMBLE_TITLE = "Instructions"


@dataclass(frozen=True)
class ParsedBody:
    title: Optional[str]
    icon: Optional[str]
    description: Optional[str]
    sections: Tuple[Section, ...]


def _split_priority(body: str) -> Tuple[Optional[str], str]:
    head, _, rest = body.lstrip("\n").partition("\n")
    if head.strip() == PRIORITY_MARKER:
        return "high", rest.lstrip("\n")
    return None, body


def block_to_section(title: str, body: str) -> Section:
    """Classify one block and hand it to the matching sub-parser."""
    priority, rest = _split_priority(body)
    if priority and classify(title, rest) is SectionKind.INSTRUCTIONS:
        return InstructionsSection(title, rest, priority)

    kind = classify(title, body)
    logger.debug("Block %r classified as %s", title, kind.value)

    if kind is SectionKind.RULES:
        rules = parse_rules(title, body)
        if rules.items:
            return rules
    elif kind is SectionKind.EXAMPLES:
        examples = parse_examples(title, body)
        if examples.examples or not body.strip():
            return examples
    elif kind is SectionKind.CONTEXT:
        return ContextSection(title, body)
    return InstructionsSection(title, body)


def _looks_like_description(paragraph: str) -> bool:
    first = paragraph.splitlines()[0]
    return not (
        is_persona_paragraph(paragraph)
        or is_list_item(first)
        or is_fence(first)
        or first.lstrip().startswith("#")
        or RE_BOLD_LABEL.match(first)
    )


def _preamble_sections(paragraphs: List[str]) -> List[Section]:
    if not paragraphs:
        return []
    text = "\n\n".join(paragraphs)
    if classify_preamble(text) is not SectionKind.PERSONA:
        return [block_to_section(PREAMBLE_TITLE, text)]

    persona = [p for p in paragraphs if is_persona_paragraph(p)]
    rest = [p for p in paragraphs if not is_persona_paragraph(p)]
    sections: List[Section] = [parse_persona("\n\n".join(persona))]
    if rest:
        sections.append(block_to_section(PREAMBLE_TITLE, "\n\n".join(rest)))
    return sections


def parse_markdown_body(body: str, description_from_preamble: bool = False) -> ParsedBody:
    """
    Parse a markdown body into sections.

    When ``description_from_preamble`` is set, the first plain paragraph
    after the H1 is taken as the package description. Dialects without a
    header block store their description there.
    """
    outline = split_blocks(body)
    paragraphs = split_paragraphs(outline.preamble)

    description = None
    if description_from_preamble and paragraphs and _looks_like_description(paragraphs[0]):
        description = " ".join(line.strip() for line in paragraphs.pop(0).splitlines())

    sections = _preamble_sections(paragraphs)
    sections.extend(block_to_section(block.title, block.body) for block in outline.blocks)
    return ParsedBody(outline.title, outline.icon, description, tuple(sections))
