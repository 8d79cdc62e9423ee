"""
Header extraction for YAML-frontmatter and TOML dialects.

Fails closed: a header that exists but does not parse raises
MalformedFrontmatter instead of being silently treated as body text.
"""

import re
import tomllib
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

import yaml

from .errors import MalformedFrontmatter, MissingRequiredField

_RE_FRONTMATTER = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*\r?$\n?", re.DOTALL | re.MULTILINE)


@dataclass(frozen=True)
class RawHeader:
    kind: str  # "yaml" or "toml"
    data: Dict[str, Any]
    raw: str

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


def extract(raw: str, toml: bool = False, dialect: Optional[str] = None) -> Tuple[Optional[RawHeader], str]:
    """
    Split ``raw`` into its header and body.

    YAML mode looks for a leading ``---`` block and returns ``(None, raw)``
    when there is none. TOML mode treats the whole document as key/value
    pairs and returns an empty body.
    """
    if toml:
        try:
            data = tomllib.loads(raw)
        except tomllib.TOMLDecodeError as e:
            raise MalformedFrontmatter(f"Invalid TOML: {e}", dialect) from e
        return RawHeader("toml", data, raw), ""

    match = _RE_FRONTMATTER.match(raw)
    if not match:
        return None, raw

    block = match.group(1)
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        raise MalformedFrontmatter(f"Invalid YAML frontmatter: {e}", dialect) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedFrontmatter(
            f"Frontmatter must be a mapping, got {type(data).__name__}", dialect
        )
    return RawHeader("yaml", data, block), raw[match.end() :]


def require_header(header: Optional[RawHeader], dialect: str) -> RawHeader:
    if header is None:
        raise MissingRequiredField("frontmatter", dialect, "document has no header block")
    return header


def dump_yaml(data: Dict[str, Any]) -> str:
    return yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False, width=1000)


def render_yaml_header(fields: Dict[str, Any]) -> str:
    """Render ``fields`` as a ``---`` block. None values are dropped."""
    data = {k: v for k, v in fields.items() if v is not None}
    if not data:
        return ""
    return f"---\n{dump_yaml(data)}---\n"


def as_list(value: Any) -> Tuple[str, ...]:
    """Normalize a comma-separated string or a YAML list into a tuple."""
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, (list, tuple)):
        return tuple(str(v).strip() for v in value if str(v).strip())
    return (str(value),)


def unknown_fields(data: Dict[str, Any], known: Iterable[str]) -> Optional[Dict[str, Any]]:
    """Header keys outside ``known``, kept so the same dialect can write them back."""
    known = set(known)
    extra = {k: v for k, v in data.items() if k not in known}
    return extra or None


def with_extra(fields: Dict[str, Any], extra: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Append carried-over header keys after the typed ones. Typed keys win."""
    if not extra:
        return fields
    merged = dict(fields)
    for key, value in extra.items():
        if merged.get(key) is None:
            merged[key] = value
    return merged
