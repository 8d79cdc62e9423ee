"""
Ruler Converter
Converts between Ruler rule files and the canonical package.

Output structure:
- .ruler/*.md (plain markdown; Ruler concatenates these with source markers)

Package identity travels in leading HTML comments:
    <!-- Package: name -->
    <!-- Author: name -->
    <!-- Description: text -->

Ruler only knows plain rules. Agents and workflows lose their semantics,
slash commands and hooks have no equivalent at all.

Reference: https://github.com/intellectronica/ruler
"""

import json
import re
from typing import Dict, List, Optional, Tuple

from ..core.converter import BaseConverter, FormatInfo, converter_registry
from ..core.package import build_package, coerce_subtype
from ..markdown import parse_markdown_body
from ..models import (
    CanonicalPackage,
    ConversionOptions,
    ConversionResult,
    CopilotExtension,
    Format,
    PackageMetadata,
    RulerExtension,
    Subtype,
)
from ..render import DialectProfile, render_markdown
from ..scoring import is_lossy, new_report, quality_score

PROFILE = DialectProfile("ruler", "Ruler", unsupported=frozenset({"persona", "tools", "hook"}))

DEFAULT_NAME = "ruler-rule"
PARTIAL_SUBTYPES = (Subtype.AGENT, Subtype.WORKFLOW)
INCOMPATIBLE_SUBTYPES = {
    Subtype.SLASH_COMMAND: "Slash commands are not supported by Ruler",
    Subtype.HOOK: "Hooks are not supported by Ruler",
}

_RE_COMMENT = re.compile(r"^\s*<!--\s*(.*?)\s*-->\s*$")
_RE_COMMENT_FIELD = re.compile(r"^(Package|Author|Description)\s*:\s*(.*)$", re.IGNORECASE)


def _split_comments(content: str) -> Tuple[Dict[str, str], Tuple[str, ...], str]:
    """Peel leading HTML comments off ``content``: (known fields, other comments, rest)."""
    fields: Dict[str, str] = {}
    others: List[str] = []
    lines = content.splitlines()
    index = 0
    while index < len(lines):
        line = lines[index]
        if not line.strip():
            index += 1
            continue
        match = _RE_COMMENT.match(line)
        if not match:
            break
        field = _RE_COMMENT_FIELD.match(match.group(1))
        if field:
            fields[field.group(1).lower()] = field.group(2).strip()
        else:
            others.append(match.group(1))
        index += 1
    return fields, tuple(others), "\n".join(lines[index:])


def parse_ruler(content: str, metadata: PackageMetadata, subtype: Optional[Subtype] = None) -> CanonicalPackage:
    fields, comments, body = _split_comments(content)
    parsed = parse_markdown_body(body, description_from_preamble="description" not in fields)
    name = fields.get("package") or metadata.name or DEFAULT_NAME
    return build_package(
        PackageMetadata(
            id=metadata.id or name,
            name=metadata.name,
            version=metadata.version,
            author=metadata.author,
            description=metadata.description,
            tags=metadata.tags,
        ),
        Format.RULER,
        parsed.sections,
        title=parsed.title,
        name=name,
        description=fields.get("description") or parsed.description,
        icon=parsed.icon,
        subtype=coerce_subtype(subtype),
        extension=RulerExtension(source_comments=comments) if comments else None,
        author=fields.get("author") if fields.get("author") not in (None, "", "Unknown") else None,
    )


def from_ruler(content: str, metadata: Optional[PackageMetadata] = None, subtype: Optional[Subtype] = None) -> ConversionResult:
    """
    Parse Ruler markdown for registry ingestion.

    Unlike the other parsers this returns a ConversionResult whose content is
    the canonical JSON package. It never raises on empty input.
    """
    metadata = metadata or PackageMetadata(id="")
    warnings: List[str] = []
    if not content.strip():
        warnings.append("Ruler file is empty")

    pkg = parse_ruler(content, metadata, subtype)
    if len(pkg.content.sections) == 1 and content.strip():
        warnings.append("No sections found in Ruler file")

    return ConversionResult(
        content=json.dumps(pkg.to_dict(), indent=2, ensure_ascii=False),
        format="canonical",
        warnings=tuple(warnings),
        lossy_conversion=is_lossy(warnings),
        quality_score=quality_score(warnings),
    )


def to_ruler(pkg: CanonicalPackage, options: Optional[ConversionOptions] = None) -> ConversionResult:
    report = new_report("ruler", options)

    meta = pkg.metadata_section
    copilot = meta.extension(CopilotExtension) if meta else None
    if copilot and copilot.apply_to:
        report.warn("Path-specific configuration (applyTo) will be ignored by Ruler")

    if pkg.subtype in PARTIAL_SUBTYPES:
        report.partial_subtype(f'Subtype "{pkg.subtype.value}" may not be fully supported by Ruler\'s simple rule format')
    elif pkg.subtype in INCOMPATIBLE_SUBTYPES:
        report.incompatible_subtype(INCOMPATIBLE_SUBTYPES[pkg.subtype])

    header = [f"<!-- Package: {pkg.name} -->", f"<!-- Author: {pkg.author or 'Unknown'} -->"]
    if pkg.description:
        header.append(f"<!-- Description: {pkg.description} -->")
    ruler = meta.extension(RulerExtension) if meta else None
    if ruler:
        header.extend(f"<!-- {comment} -->" for comment in ruler.source_comments)

    body = render_markdown(pkg, PROFILE, report)
    content = "\n".join(header) + "\n\n" + body
    return report.finish(content, pkg.subtype)


@converter_registry.register
class RulerConverter(BaseConverter):
    format_info = FormatInfo(
        name="ruler",
        display_name="Ruler",
        output_dir=".ruler",
    )

    def parse(self, content, metadata, **options):
        return parse_ruler(content, metadata, options.get("subtype"))

    def serialize(self, pkg, options=None):
        return to_ruler(pkg, options)
