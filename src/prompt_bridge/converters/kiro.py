"""
Kiro Steering Converter
Converts between Kiro steering files and the canonical package.

Output structure:
- .kiro/steering/*.md (inclusion: always | fileMatch | manual)
- .kiro/steering/{product,tech,structure}.md (foundational files)

Frontmatter is mandatory: ``inclusion`` always, ``fileMatchPattern`` when
inclusion is ``fileMatch``.

Reference: https://kiro.dev/docs/steering/
"""

import logging
import re
from typing import List, Optional

from ..core.converter import BaseConverter, FormatInfo, converter_registry
from ..core.package import build_package, coerce_subtype
from ..errors import MissingRequiredField
from ..frontmatter import extract, render_yaml_header, require_header, unknown_fields, with_extra
from ..markdown import parse_markdown_body
from ..models import (
    CanonicalPackage,
    ConversionOptions,
    ConversionResult,
    Format,
    KiroExtension,
    PackageMetadata,
    Subtype,
)
from ..render import DialectProfile, render_markdown, with_header
from ..scoring import new_report

logger = logging.getLogger(__name__)

PROFILE = DialectProfile("kiro", "Kiro", unsupported=frozenset({"persona", "tools", "hook"}))

DEFAULT_INCLUSION = "always"
HEADER_FIELDS = ("inclusion", "fileMatchPattern", "domain")
FOUNDATIONAL_FILES = ("product", "tech", "structure")

_RE_PATTERN_DOMAIN = re.compile(r"/([^/]+)/")


def detect_foundational_type(name: str) -> Optional[str]:
    normalized = name.lower()
    if normalized.endswith(".md"):
        normalized = normalized[:-3]
    return normalized if normalized in FOUNDATIONAL_FILES else None


def infer_tags(inclusion: str, pattern: Optional[str], foundational: Optional[str]) -> List[str]:
    """Tags such as kiro-tech, kiro-fileMatch and the directory in the match pattern."""
    tags = []
    if foundational:
        tags.append(f"kiro-{foundational}")
    tags.append(f"kiro-{inclusion}")
    if pattern:
        # "src/api/**/*.ts" -> "api"
        match = _RE_PATTERN_DOMAIN.search(pattern)
        if match:
            tags.append(match.group(1))
    return tags


def from_kiro(content: str, metadata: PackageMetadata, subtype: Optional[Subtype] = None) -> CanonicalPackage:
    header, body = extract(content, dialect="kiro")
    data = require_header(header, "kiro").data

    inclusion = data.get("inclusion")
    if not inclusion:
        raise MissingRequiredField("inclusion", "kiro", "steering files require an inclusion mode")
    pattern = data.get("fileMatchPattern")
    if inclusion == "fileMatch" and not pattern:
        raise MissingRequiredField("fileMatchPattern", "kiro", "fileMatch inclusion requires a pattern")

    name = metadata.name or metadata.id
    foundational = detect_foundational_type(name)
    extension = KiroExtension(
        inclusion=inclusion,
        file_match_pattern=pattern,
        domain=data.get("domain") or name.replace("-", " "),
        foundational_type=foundational,
        extra=unknown_fields(data, HEADER_FIELDS),
    )
    parsed = parse_markdown_body(body, description_from_preamble=True)

    return build_package(
        metadata,
        Format.KIRO,
        parsed.sections,
        title=parsed.title,
        description=parsed.description,
        icon=parsed.icon,
        subtype=coerce_subtype(subtype),
        extension=extension,
        tags=infer_tags(inclusion, pattern, foundational),
    )


def to_kiro(pkg: CanonicalPackage, options: Optional[ConversionOptions] = None) -> ConversionResult:
    report = new_report("kiro", options)
    meta = pkg.metadata_section
    extension = (meta.extension(KiroExtension) if meta else None) or KiroExtension()

    inclusion = (options.kiro_inclusion if options else None) or extension.inclusion
    if not inclusion:
        inclusion = DEFAULT_INCLUSION
        report.warn(f"No inclusion mode set, defaulting to '{DEFAULT_INCLUSION}'")
        logger.debug("Kiro inclusion defaulted for %s", pkg.name)
    pattern = (options.kiro_file_match_pattern if options else None) or extension.file_match_pattern

    fields = {"inclusion": inclusion}
    if inclusion == "fileMatch":
        fields["fileMatchPattern"] = pattern

    body = render_markdown(pkg, PROFILE, report, description_in_body=True)
    header = render_yaml_header(with_extra(fields, extension.extra))
    return report.finish(with_header(header, body), pkg.subtype)


@converter_registry.register
class KiroConverter(BaseConverter):
    format_info = FormatInfo(
        name="kiro",
        display_name="Kiro CLI",
        output_dir=".kiro/steering",
    )

    def parse(self, content, metadata, **options):
        return from_kiro(content, metadata, options.get("subtype"))

    def serialize(self, pkg, options=None):
        return to_kiro(pkg, options)
