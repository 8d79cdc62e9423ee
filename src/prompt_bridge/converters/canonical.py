"""
Canonical Package Converter
Reads and writes the persisted ``canonical.json`` artifact.

Layout:
    {"id": ..., "name": ..., "format": ..., "subtype": ...,
     "metadata": {...}, "content": {"format": "canonical", "version": "1.0", "sections": [...]}}
"""

import json
from typing import Any, Dict, Optional

from ..core.converter import BaseConverter, FormatInfo, converter_registry
from ..errors import ParseError
from ..models import CANONICAL_VERSION, CanonicalPackage, ConversionOptions, ConversionResult, PackageMetadata
from ..scoring import new_report


def to_canonical(pkg: CanonicalPackage) -> Dict[str, Any]:
    return pkg.to_dict()


def to_canonical_json(pkg: CanonicalPackage) -> str:
    return json.dumps(to_canonical(pkg), indent=2, ensure_ascii=False) + "\n"


def from_canonical(content: str, metadata: Optional[PackageMetadata] = None) -> CanonicalPackage:
    """Load a package from canonical JSON. ``metadata`` fills in a missing id."""
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid canonical JSON: {e}", "canonical") from e
    if not isinstance(data, dict):
        raise ParseError("Canonical package must be a JSON object", "canonical")

    body = data.get("content")
    if not isinstance(body, dict) or body.get("format", "canonical") != "canonical":
        raise ParseError("Missing content block with format 'canonical'", "canonical")
    if body.get("version", CANONICAL_VERSION) != CANONICAL_VERSION:
        raise ParseError(f"Unsupported canonical version {body.get('version')!r}", "canonical")

    if metadata and not data.get("id"):
        data = {**data, "id": metadata.id}
    try:
        return CanonicalPackage.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ParseError(f"Invalid canonical package: {e}", "canonical") from e


def serialize_canonical(pkg: CanonicalPackage, options: Optional[ConversionOptions] = None) -> ConversionResult:
    report = new_report("canonical", options)
    return report.finish(to_canonical_json(pkg), pkg.subtype)


@converter_registry.register
class CanonicalConverter(BaseConverter):
    format_info = FormatInfo(
        name="canonical",
        display_name="Canonical JSON",
        output_dir=".",
        extension=".json",
        aliases=("json", "prpm"),
    )

    def parse(self, content, metadata, **options):
        return from_canonical(content, metadata)

    def serialize(self, pkg, options=None):
        return serialize_canonical(pkg, options)

    def output_path(self, pkg):
        return "canonical.json"
