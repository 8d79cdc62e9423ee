"""
Sub-parsers that turn a classified block body into a typed section.

All three are best effort and never raise: a line they cannot place is
folded into the nearest rule or ignored.
"""

import re
from functools import reduce
from typing import List, NamedTuple, Optional, Tuple

from .classifier import RE_H3, RE_LIST_ITEM, FenceTracker, split_paragraphs
from .models import Example, ExamplesSection, PersonaSection, Rule, RulesSection

# =============================================================================
# RULES
# =============================================================================

_RE_NUMBERED = re.compile(r"^\s*\d+[.)]\s+")
_RE_BOLD_LABEL = re.compile(r"^\*\*([^*]+?)\*\*\s*:?\s*(.*)$")
_RE_ITALIC = re.compile(r"^\*(?!\*)(?!\s)(.+?)\*$|^_(?!_)(?!\s)(.+?)_$")
_RE_RATIONALE_PREFIX = re.compile(r"^\*?Rationale:\*?\s*", re.IGNORECASE)
_RE_PLAIN_RATIONALE = re.compile(r"^(?:Rationale|Why):\s*", re.IGNORECASE)
_RE_EXAMPLE_PREFIX = re.compile(r"^\*?Example:\*?\s*", re.IGNORECASE)
_RE_SUB_BULLET = re.compile(r"^(?:[-*+]|\d+[.)])\s+")


class _RuleDraft(NamedTuple):
    content: Tuple[str, ...]
    rationale: Optional[str] = None
    examples: Tuple[str, ...] = ()

    def build(self) -> Rule:
        return Rule(" ".join(self.content).strip(), self.rationale, self.examples)


class _RulesState(NamedTuple):
    rules: Tuple[Rule, ...] = ()
    current: Optional[_RuleDraft] = None
    ordered: Optional[bool] = None

    def close(self) -> "_RulesState":
        if self.current is None:
            return self
        rule = self.current.build()
        rules = self.rules + (rule,) if rule.content else self.rules
        return self._replace(rules=rules, current=None)


def _strip_item_marker(line: str) -> str:
    text = RE_LIST_ITEM.sub("", line, count=1).strip()
    label = _RE_BOLD_LABEL.match(text)
    if label:
        # "**Label**: text" keeps the text, or the label when nothing follows
        return label.group(2).strip() or label.group(1).strip().rstrip(":")
    return text


def _italic(text: str) -> Optional[str]:
    match = _RE_ITALIC.match(text)
    if not match:
        return None
    return (match.group(1) or match.group(2)).strip()


def _rationale(text: str) -> Optional[str]:
    inner = _italic(text)
    if inner is not None:
        return _RE_RATIONALE_PREFIX.sub("", inner).strip()
    if re.match(r"^\*Rationale:\*", text, re.IGNORECASE):
        return _RE_RATIONALE_PREFIX.sub("", text).strip()
    if _RE_PLAIN_RATIONALE.match(text):
        return _RE_PLAIN_RATIONALE.sub("", text).strip()
    return None


def _attach(state: _RulesState, text: str) -> _RulesState:
    """Attach a detail line to the rule being built."""
    draft = state.current
    rationale = _rationale(text)
    if rationale is not None:
        return state._replace(current=draft._replace(rationale=rationale))
    if _RE_EXAMPLE_PREFIX.match(text):
        example = _RE_EXAMPLE_PREFIX.sub("", text).strip().strip("`").strip()
        return state._replace(current=draft._replace(examples=draft.examples + (example,)))
    return state._replace(current=draft._replace(content=draft.content + (text,)))


def _fold_rule_line(state: _RulesState, line: str) -> _RulesState:
    if not line.strip():
        return state

    indented = line.startswith(("  ", "\t"))
    text = line.strip()

    if indented and state.current is not None:
        return _attach(state, _RE_SUB_BULLET.sub("", text, count=1))

    starts_rule = bool(RE_LIST_ITEM.match(line)) or bool(_RE_BOLD_LABEL.match(text))
    if starts_rule:
        state = state.close()
        ordered = state.ordered
        if ordered is None:
            ordered = bool(_RE_NUMBERED.match(line))
        return state._replace(current=_RuleDraft((_strip_item_marker(text),)), ordered=ordered)

    if state.current is not None:
        return _attach(state, text)

    return state._replace(current=_RuleDraft((text,)))


def parse_rules(title: str, body: str) -> RulesSection:
    """Parse list items and bold-label lines into Rule items, in source order."""
    fence = FenceTracker()
    lines = [line for line in body.splitlines() if not fence.feed(line)]
    state = reduce(_fold_rule_line, lines, _RulesState()).close()
    ordered = True if state.ordered else None
    return RulesSection(title=title, items=state.rules, ordered=ordered)


# =============================================================================
# EXAMPLES
# =============================================================================

GOOD_MARKERS = ("✓", "✅", "✔")
BAD_MARKERS = ("❌", "✗", "✘")
_RE_GOOD_PREFIX = re.compile(r"^(?:good|correct|preferred)(?:\s+example)?(?:\s*[:\-]\s*|\s*$)", re.IGNORECASE)
_RE_BAD_PREFIX = re.compile(r"^(?:bad|incorrect|wrong|avoid)(?:\s+example)?(?:\s*[:\-]\s*|\s*$)", re.IGNORECASE)
DEFAULT_EXAMPLE_DESCRIPTION = "Example"


def _split_marker(header: str) -> Tuple[str, Optional[bool]]:
    text = header.strip()
    good: Optional[bool] = None
    for marker in GOOD_MARKERS:
        if text.startswith(marker):
            text, good = text[len(marker) :].lstrip("️").strip(), True
            break
    else:
        for marker in BAD_MARKERS:
            if text.startswith(marker):
                text, good = text[len(marker) :].lstrip("️").strip(), False
                break

    if _RE_GOOD_PREFIX.match(text):
        text = _RE_GOOD_PREFIX.sub("", text, count=1)
        good = True if good is None else good
    elif _RE_BAD_PREFIX.match(text):
        text = _RE_BAD_PREFIX.sub("", text, count=1)
        good = False if good is None else good
    return text.strip(), good


def _first_fence(lines: List[str]) -> Tuple[Optional[str], Optional[str]]:
    """Return (code, language) of the first fenced block in ``lines``."""
    fence = FenceTracker()
    for i, line in enumerate(lines):
        if not fence.feed(line):
            continue
        language = line.strip().lstrip("`~").strip() or None
        code: List[str] = []
        for inner in lines[i + 1 :]:
            if fence.feed(inner):
                break
            code.append(inner)
        return "\n".join(code), language
    return None, None


def _chunk_example(header: str, lines: List[str]) -> Optional[Example]:
    code, language = _first_fence(lines)
    if code is None:
        return None
    description, good = _split_marker(header)
    return Example(description or DEFAULT_EXAMPLE_DESCRIPTION, code, language, good)


def parse_examples(title: str, body: str) -> ExamplesSection:
    """Split a block on ``###`` sub-headers and read one Example from each."""
    chunks: List[Tuple[str, List[str]]] = [("", [])]
    fence = FenceTracker()
    for line in body.splitlines():
        if not fence.feed(line) and not fence.inside and RE_H3.match(line):
            chunks.append((RE_H3.sub("", line, count=1), []))
            continue
        chunks[-1][1].append(line)

    examples = tuple(ex for ex in (_chunk_example(h, body_lines) for h, body_lines in chunks) if ex)
    return ExamplesSection(title=title, examples=examples)


# =============================================================================
# PERSONA
# =============================================================================
# Heuristic. "You are A, B" reads A as the name and B as the role; without the
# comma clause A is the role. Kept as-is so existing documents parse the same.

_RE_YOU_ARE = re.compile(r"You are\s+([^,.\n]+)(?:,\s*(?:a\s+)?([^.\n]+))?", re.IGNORECASE)
_RE_ROLE_IS = re.compile(r"Your role is\s+(?:to\s+)?([^.\n]+)", re.IGNORECASE)
_RE_STYLE = re.compile(r"(?:communication\s+)?style(?:\s+is)?\s*:?\s*([^.\n]+)", re.IGNORECASE)
_RE_STYLE_SPLIT = re.compile(r",|\s+and\s+")
_RE_EXPERTISE_LEAD = re.compile(r"expertise|areas of", re.IGNORECASE)


def is_persona_paragraph(paragraph: str) -> bool:
    return bool(
        re.match(r"^\s*You are\s", paragraph, re.IGNORECASE)
        or _RE_ROLE_IS.search(paragraph)
        or re.match(r"^\s*Your (?:communication )?style", paragraph, re.IGNORECASE)
        or _RE_EXPERTISE_LEAD.search(paragraph.splitlines()[0])
    )


def _expertise(text: str) -> Tuple[str, ...]:
    items: List[str] = []
    collecting = False
    for line in text.splitlines():
        stripped = line.strip()
        if _RE_EXPERTISE_LEAD.search(stripped) and not stripped.startswith(("-", "*")):
            collecting = True
            continue
        if not collecting:
            continue
        if stripped.startswith(("- ", "* ")):
            items.append(stripped[2:].strip())
        elif stripped:
            collecting = False
    return tuple(items)


def parse_persona(text: str) -> PersonaSection:
    """Read name, role, style and expertise from persona prose."""
    name: Optional[str] = None
    role = ""

    you_are = _RE_YOU_ARE.search(text)
    if you_are:
        first, second = you_are.group(1).strip(), you_are.group(2)
        if second and second.strip():
            name, role = first, second.strip()
        else:
            role = first
    else:
        role_is = _RE_ROLE_IS.search(text)
        if role_is:
            role = role_is.group(1).strip()
        else:
            paragraphs = split_paragraphs(text)
            role = paragraphs[0].splitlines()[0].strip() if paragraphs else ""

    style: Tuple[str, ...] = ()
    style_match = _RE_STYLE.search(text)
    if style_match:
        style = tuple(part.strip() for part in _RE_STYLE_SPLIT.split(style_match.group(1)) if part.strip())

    return PersonaSection(role=role, name=name, style=style, expertise=_expertise(text))
