"""
Markdown segmentation and section classification.

``split_blocks`` cuts a markdown body into its H1 title, preamble and
``##`` blocks while tracking fenced code, so a ``#`` line inside a fence is
never a boundary. ``classify`` then types each block with an ordered list of
predicates: the first one that matches wins.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class SectionKind(str, Enum):
    INSTRUCTIONS = "instructions"
    RULES = "rules"
    EXAMPLES = "examples"
    CONTEXT = "context"
    PERSONA = "persona"


# =============================================================================
# PATTERNS
# =============================================================================

EXAMPLE_KEYWORDS = ("example", "sample")
RULE_KEYWORDS = ("rule", "guideline", "principle", "command", "standard", "convention", "policy")
CONTEXT_KEYWORDS = ("context", "background", "overview")
LOOKAHEAD_LINES = 5
# First line of an instructions block with priority "high".
PRIORITY_MARKER = "**Important:**"

RE_FENCE = re.compile(r"^\s*(`{3,}|~{3,})(.*)$")
RE_LIST_ITEM = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+")
RE_BOLD_LABEL = re.compile(r"^\s*\*\*[^*]+?\*\*\s*:?")
RE_H1 = re.compile(r"^#\s+(.+?)\s*#*\s*$")
RE_H2 = re.compile(r"^##\s+(.+?)\s*#*\s*$")
RE_H3 = re.compile(r"^###\s+")
RE_PERSONA = re.compile(r"^\s*You are\s", re.IGNORECASE)
RE_ROLE_IS = re.compile(r"Your role is", re.IGNORECASE)
RE_ICON = re.compile(
    r"^([\u2600-\u27BF\U0001F000-\U0001FAFF][\uFE0F\u200D\u2600-\u27BF\U0001F000-\U0001FAFF]*)\s+(.+)$"
)


def is_fence(line: str) -> bool:
    return bool(RE_FENCE.match(line))


class FenceTracker:
    """Follows fenced code through a stream of lines.

    A fence closes only on a line of the opening character, at least as long
    as the opener and with no info string, so ``` inside ~~~ (or inside a
    longer backtick fence) is plain code.
    """

    def __init__(self) -> None:
        self.opener: Optional[str] = None

    @property
    def inside(self) -> bool:
        return self.opener is not None

    def feed(self, line: str) -> bool:
        """Advance over ``line``; True when it opens or closes a fence."""
        match = RE_FENCE.match(line)
        if not match:
            return False
        marker, info = match.group(1), match.group(2).strip()
        if self.opener is None:
            self.opener = marker
            return True
        if marker[0] == self.opener[0] and len(marker) >= len(self.opener) and not info:
            self.opener = None
            return True
        return False


def is_list_item(line: str) -> bool:
    return bool(RE_LIST_ITEM.match(line))


def has_fence(body: str) -> bool:
    return any(is_fence(line) for line in body.splitlines())


def split_icon(title: str) -> Tuple[Optional[str], str]:
    """Split a leading emoji off a heading: "🤖 Bot" -> ("🤖", "Bot")."""
    match = RE_ICON.match(title.strip())
    if match:
        return match.group(1), match.group(2).strip()
    return None, title.strip()


# =============================================================================
# CLASSIFICATION
# =============================================================================


def _title_has(title: str, keywords: Sequence[str]) -> bool:
    lowered = title.lower()
    return any(word in lowered for word in keywords)


def _first_content_line(body: str) -> str:
    for line in body.splitlines():
        if line.strip():
            return line
    return ""


def _is_examples(title: str, body: str) -> bool:
    return _title_has(title, EXAMPLE_KEYWORDS) or has_fence(body)


def _is_rules(title: str, body: str) -> bool:
    if _title_has(title, RULE_KEYWORDS):
        return True
    first = _first_content_line(body)
    return is_list_item(first) or bool(RE_BOLD_LABEL.match(first))


def _is_context(title: str, body: str) -> bool:
    return _title_has(title, CONTEXT_KEYWORDS)


def _lookahead(title: str, body: str) -> Optional[SectionKind]:
    for line in body.splitlines()[:LOOKAHEAD_LINES]:
        if is_list_item(line):
            return SectionKind.RULES
        if RE_H3.match(line) or is_fence(line):
            return SectionKind.EXAMPLES
    return None


_PREDICATES: List[Tuple[SectionKind, Callable[[str, str], bool]]] = [
    (SectionKind.EXAMPLES, _is_examples),
    (SectionKind.RULES, _is_rules),
    (SectionKind.CONTEXT, _is_context),
]


def classify(title: str, body: str) -> SectionKind:
    """Type a ``##`` block from its title and body."""
    for kind, predicate in _PREDICATES:
        if predicate(title, body):
            return kind
    return _lookahead(title, body) or SectionKind.INSTRUCTIONS


def classify_preamble(text: str) -> SectionKind:
    if RE_PERSONA.match(text) or RE_ROLE_IS.search(text):
        return SectionKind.PERSONA
    return SectionKind.INSTRUCTIONS


# =============================================================================
# SEGMENTATION
# =============================================================================


@dataclass(frozen=True)
class Block:
    title: str
    body: str


@dataclass(frozen=True)
class Outline:
    title: Optional[str]
    icon: Optional[str]
    preamble: str
    blocks: Tuple[Block, ...]


def split_blocks(body: str) -> Outline:
    """Cut ``body`` at H1/H2 headings that are outside fenced code."""
    title: Optional[str] = None
    icon: Optional[str] = None
    preamble: List[str] = []
    blocks: List[Block] = []
    current_title: Optional[str] = None
    current: List[str] = []
    fence = FenceTracker()

    def flush() -> None:
        if current_title is not None:
            blocks.append(Block(current_title, "\n".join(current).strip("\n")))

    for line in body.splitlines():
        if not fence.feed(line) and not fence.inside:
            h1 = RE_H1.match(line)
            if h1 and title is None and current_title is None and not "".join(preamble).strip():
                icon, title = split_icon(h1.group(1))
                continue
            h2 = RE_H2.match(line) or h1
            if h2:
                flush()
                current_title = h2.group(1).strip()
                current = []
                continue
        if current_title is None:
            preamble.append(line)
        else:
            current.append(line)
    flush()

    return Outline(title, icon, "\n".join(preamble).strip(), tuple(blocks))


def split_paragraphs(text: str) -> List[str]:
    """Split on blank lines, keeping fenced blocks whole."""
    paragraphs: List[str] = []
    current: List[str] = []
    fence = FenceTracker()
    for line in text.splitlines():
        fence.feed(line)
        if not line.strip() and not fence.inside:
            if current:
                paragraphs.append("\n".join(current))
                current = []
            continue
        current.append(line)
    if current:
        paragraphs.append("\n".join(current))
    return paragraphs
