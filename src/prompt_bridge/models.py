"""
Canonical model shared by every parser and serializer.

A CanonicalPackage is an immutable tree: package identity, a closed set of
section variants and a typed extension per dialect. Parsers build it,
serializers only read it. ``to_dict``/``from_dict`` give the camelCase JSON
shape persisted as ``canonical.json``.
"""

from dataclasses import dataclass, fields, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Type, TypeVar, Union

CANONICAL_VERSION = "1.0"


class Format(str, Enum):
    CLAUDE = "claude"
    CURSOR = "cursor"
    CONTINUE = "continue"
    WINDSURF = "windsurf"
    COPILOT = "copilot"
    KIRO = "kiro"
    RULER = "ruler"
    GEMINI = "gemini"
    DROID = "droid"
    OPENCODE = "opencode"
    AGENTS_MD = "agents.md"
    AIDER = "aider"
    TRAE = "trae"
    ZENCODER = "zencoder"
    GENERIC = "generic"


class Subtype(str, Enum):
    RULE = "rule"
    AGENT = "agent"
    SKILL = "skill"
    SLASH_COMMAND = "slash-command"
    PROMPT = "prompt"
    WORKFLOW = "workflow"
    TOOL = "tool"
    TEMPLATE = "template"
    COLLECTION = "collection"
    HOOK = "hook"


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is None or an empty collection."""
    return {k: v for k, v in data.items() if v is not None and v != () and v != [] and v != {}}


# =============================================================================
# RULES & EXAMPLES
# =============================================================================


@dataclass(frozen=True)
class Rule:
    content: str
    rationale: Optional[str] = None
    examples: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return _compact({"content": self.content, "rationale": self.rationale, "examples": list(self.examples)})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Rule":
        return cls(
            content=str(data.get("content", "")),
            rationale=data.get("rationale"),
            examples=tuple(data.get("examples") or ()),
        )


@dataclass(frozen=True)
class Example:
    """A code sample. ``good`` is True, False or None when unmarked."""

    description: str
    code: str
    language: Optional[str] = None
    good: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            {"description": self.description, "code": self.code, "language": self.language, "good": self.good}
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Example":
        return cls(
            description=str(data.get("description", "")),
            code=str(data.get("code", "")),
            language=data.get("language"),
            good=data.get("good"),
        )


@dataclass(frozen=True)
class Author:
    name: str
    email: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>" if self.email else self.name

    def to_dict(self) -> Dict[str, Any]:
        return _compact({"name": self.name, "email": self.email})

    @classmethod
    def coerce(cls, value: Any) -> Optional["Author"]:
        """Accept an Author, a mapping, a "Name <email>" string or None."""
        if value is None or isinstance(value, Author):
            return value
        if isinstance(value, Mapping):
            return cls(str(value.get("name", "")), value.get("email"))
        text = str(value).strip()
        if not text:
            return None
        if text.endswith(">") and "<" in text:
            name, _, email = text[:-1].rpartition("<")
            return cls(name.strip(), email.strip() or None)
        return cls(text)


# =============================================================================
# DIALECT EXTENSIONS
# =============================================================================
# One frozen dataclass per dialect. Serializers look up only their own type,
# so a Cursor glob can never leak into a Kiro header.


class _Extension:
    dialect: ClassVar[str]

    def to_dict(self) -> Dict[str, Any]:
        return _compact({_camel(f.name): getattr(self, f.name) for f in fields(self)})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        known = {_camel(f.name): f.name for f in fields(cls)}
        kwargs = {known[k]: v for k, v in data.items() if k in known}
        for f in fields(cls):
            if f.name in kwargs and isinstance(kwargs[f.name], list):
                kwargs[f.name] = tuple(kwargs[f.name])
        return cls(**kwargs)


@dataclass(frozen=True)
class ClaudeExtension(_Extension):
    dialect: ClassVar[str] = "claude"
    model: Optional[str] = None
    argument_hint: Optional[str] = None
    extra: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class CursorExtension(_Extension):
    dialect: ClassVar[str] = "cursor"
    globs: Tuple[str, ...] = ()
    always_apply: Optional[bool] = None
    extra: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class ContinueExtension(_Extension):
    dialect: ClassVar[str] = "continue"
    globs: Tuple[str, ...] = ()
    regex: Optional[str] = None
    always_apply: Optional[bool] = None
    invokable: Optional[bool] = None
    extra: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class CopilotExtension(_Extension):
    dialect: ClassVar[str] = "copilot"
    apply_to: Optional[str] = None
    exclude_agent: Optional[str] = None
    extra: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class KiroExtension(_Extension):
    dialect: ClassVar[str] = "kiro"
    inclusion: Optional[str] = None
    file_match_pattern: Optional[str] = None
    domain: Optional[str] = None
    foundational_type: Optional[str] = None
    extra: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class KiroAgentExtension(_Extension):
    dialect: ClassVar[str] = "kiroAgent"
    tools: Tuple[str, ...] = ()
    allowed_tools: Tuple[str, ...] = ()
    tool_aliases: Optional[Dict[str, str]] = None
    tools_settings: Optional[Dict[str, Any]] = None
    mcp_servers: Optional[Dict[str, Any]] = None
    resources: Tuple[str, ...] = ()
    hooks: Optional[Dict[str, Any]] = None
    model: Optional[str] = None
    use_legacy_mcp_json: Optional[bool] = None


@dataclass(frozen=True)
class OpenCodeExtension(_Extension):
    dialect: ClassVar[str] = "opencode"
    mode: Optional[str] = None
    model: Optional[str] = None
    temperature: Optional[float] = None
    permission: Optional[Dict[str, Any]] = None
    tools: Optional[Dict[str, bool]] = None
    disable: Optional[bool] = None
    hidden: Optional[bool] = None
    agent: Optional[str] = None
    subtask: Optional[bool] = None
    extra: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class DroidExtension(_Extension):
    dialect: ClassVar[str] = "droid"
    argument_hint: Optional[str] = None
    allowed_tools: Tuple[str, ...] = ()
    extra: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class RulerExtension(_Extension):
    dialect: ClassVar[str] = "ruler"
    source_comments: Tuple[str, ...] = ()


@dataclass(frozen=True)
class WindsurfExtension(_Extension):
    dialect: ClassVar[str] = "windsurf"
    character_count: Optional[int] = None


@dataclass(frozen=True)
class ZencoderExtension(_Extension):
    dialect: ClassVar[str] = "zencoder"
    globs: Tuple[str, ...] = ()
    always_apply: Optional[bool] = None
    extra: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class AgentsMdExtension(_Extension):
    dialect: ClassVar[str] = "agentsMd"
    project: Optional[str] = None


DialectExtension = Union[
    ClaudeExtension,
    CursorExtension,
    ContinueExtension,
    CopilotExtension,
    KiroExtension,
    KiroAgentExtension,
    OpenCodeExtension,
    DroidExtension,
    RulerExtension,
    WindsurfExtension,
    ZencoderExtension,
    AgentsMdExtension,
]

EXTENSION_TYPES: Dict[str, Type[_Extension]] = {
    cls.dialect: cls
    for cls in (
        ClaudeExtension,
        CursorExtension,
        ContinueExtension,
        CopilotExtension,
        KiroExtension,
        KiroAgentExtension,
        OpenCodeExtension,
        DroidExtension,
        RulerExtension,
        WindsurfExtension,
        ZencoderExtension,
        AgentsMdExtension,
    )
}

E = TypeVar("E", bound=_Extension)


# =============================================================================
# SECTIONS
# =============================================================================


@dataclass(frozen=True)
class MetadataSection:
    type: ClassVar[str] = "metadata"
    title: str
    description: str = ""
    icon: Optional[str] = None
    version: Optional[str] = None
    author: Optional[str] = None
    extensions: Tuple[DialectExtension, ...] = ()

    def extension(self, kind: Type[E]) -> Optional[E]:
        """Return this package's extension of type ``kind``, if any."""
        for ext in self.extensions:
            if isinstance(ext, kind):
                return ext
        return None

    def with_extension(self, ext: Optional[DialectExtension]) -> "MetadataSection":
        if ext is None:
            return self
        kept = tuple(e for e in self.extensions if type(e) is not type(ext))
        return replace(self, extensions=kept + (ext,))

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "version": self.version,
            "author": self.author,
        }
        data = {k: v for k, v in data.items() if v is not None}
        for ext in self.extensions:
            ext_data = ext.to_dict()
            if ext_data:
                data[ext.dialect] = ext_data
        return {"type": self.type, "data": data}


@dataclass(frozen=True)
class InstructionsSection:
    type: ClassVar[str] = "instructions"
    title: str
    content: str
    priority: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, **_compact({"title": self.title, "content": self.content, "priority": self.priority})}


@dataclass(frozen=True)
class RulesSection:
    type: ClassVar[str] = "rules"
    title: str
    items: Tuple[Rule, ...] = ()
    ordered: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"type": self.type, "title": self.title, "items": [r.to_dict() for r in self.items]}
        if self.ordered is not None:
            data["ordered"] = self.ordered
        return data


@dataclass(frozen=True)
class ExamplesSection:
    type: ClassVar[str] = "examples"
    title: str
    examples: Tuple[Example, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "title": self.title, "examples": [e.to_dict() for e in self.examples]}


@dataclass(frozen=True)
class PersonaSection:
    type: ClassVar[str] = "persona"
    role: str
    name: Optional[str] = None
    icon: Optional[str] = None
    style: Tuple[str, ...] = ()
    expertise: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data = _compact(
            {
                "name": self.name,
                "role": self.role,
                "icon": self.icon,
                "style": list(self.style),
                "expertise": list(self.expertise),
            }
        )
        return {"type": self.type, "data": data}


@dataclass(frozen=True)
class ToolsSection:
    type: ClassVar[str] = "tools"
    tools: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "tools": list(self.tools)}


@dataclass(frozen=True)
class ContextSection:
    type: ClassVar[str] = "context"
    title: str
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "title": self.title, "content": self.content}


@dataclass(frozen=True)
class HookSection:
    type: ClassVar[str] = "hook"
    event: str
    language: str
    code: str
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            **_compact(
                {"event": self.event, "language": self.language, "code": self.code, "description": self.description}
            ),
        }


@dataclass(frozen=True)
class CustomSection:
    type: ClassVar[str] = "custom"
    content: str
    editor_type: Optional[str] = None
    title: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            **_compact({"editorType": self.editor_type, "title": self.title, "content": self.content}),
        }


Section = Union[
    MetadataSection,
    InstructionsSection,
    RulesSection,
    ExamplesSection,
    PersonaSection,
    ToolsSection,
    ContextSection,
    HookSection,
    CustomSection,
]


def section_from_dict(data: Mapping[str, Any]) -> Section:
    """Build one section from its JSON form. Raises ValueError on an unknown type."""
    kind = data.get("type")
    if kind == "metadata":
        meta = dict(data.get("data") or {})
        extensions = tuple(
            EXTENSION_TYPES[key].from_dict(meta.pop(key)) for key in list(meta) if key in EXTENSION_TYPES
        )
        return MetadataSection(
            title=str(meta.get("title", "")),
            description=str(meta.get("description", "")),
            icon=meta.get("icon"),
            version=meta.get("version"),
            author=meta.get("author"),
            extensions=extensions,
        )
    if kind == "instructions":
        return InstructionsSection(str(data.get("title", "")), str(data.get("content", "")), data.get("priority"))
    if kind == "rules":
        return RulesSection(
            title=str(data.get("title", "")),
            items=tuple(Rule.from_dict(r) for r in data.get("items") or ()),
            ordered=data.get("ordered"),
        )
    if kind == "examples":
        return ExamplesSection(
            title=str(data.get("title", "")),
            examples=tuple(Example.from_dict(e) for e in data.get("examples") or ()),
        )
    if kind == "persona":
        persona = data.get("data") or {}
        return PersonaSection(
            role=str(persona.get("role", "")),
            name=persona.get("name"),
            icon=persona.get("icon"),
            style=tuple(persona.get("style") or ()),
            expertise=tuple(persona.get("expertise") or ()),
        )
    if kind == "tools":
        return ToolsSection(tuple(data.get("tools") or ()))
    if kind == "context":
        return ContextSection(str(data.get("title", "")), str(data.get("content", "")))
    if kind == "hook":
        return HookSection(
            event=str(data.get("event", "")),
            language=str(data.get("language", "")),
            code=str(data.get("code", "")),
            description=data.get("description"),
        )
    if kind == "custom":
        return CustomSection(str(data.get("content", "")), data.get("editorType"), data.get("title"))
    raise ValueError(f"Unknown section type: {kind!r}")


# =============================================================================
# PACKAGE
# =============================================================================


@dataclass(frozen=True)
class CanonicalContent:
    sections: Tuple[Section, ...]
    format: str = "canonical"
    version: str = CANONICAL_VERSION

    @property
    def metadata(self) -> Optional[MetadataSection]:
        if self.sections and isinstance(self.sections[0], MetadataSection):
            return self.sections[0]
        return None

    @property
    def body(self) -> Tuple[Section, ...]:
        """Sections after the metadata section."""
        return self.sections[1:] if self.metadata else self.sections

    def to_dict(self) -> Dict[str, Any]:
        return {"format": self.format, "version": self.version, "sections": [s.to_dict() for s in self.sections]}


@dataclass(frozen=True)
class PackageMetadata:
    """Identity fields the caller knows about a document before parsing it."""

    id: str
    name: Optional[str] = None
    version: Optional[str] = None
    author: Optional[Union[str, Author]] = None
    description: Optional[str] = None
    tags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CanonicalPackage:
    id: str
    name: str
    version: str
    description: str
    author: Optional[Author]
    content: CanonicalContent
    format: Format = Format.GENERIC
    subtype: Subtype = Subtype.RULE
    tags: frozenset = frozenset()
    source_format: Optional[str] = None
    license: Optional[str] = None
    repository: Optional[str] = None
    homepage: Optional[str] = None
    category: Optional[str] = None
    keywords: Tuple[str, ...] = ()

    def __post_init__(self):
        sections = self.content.sections
        meta_positions = [i for i, s in enumerate(sections) if isinstance(s, MetadataSection)]
        if meta_positions not in ([], [0]):
            raise ValueError("MetadataSection must appear at most once, as the first section")

    @property
    def metadata_section(self) -> Optional[MetadataSection]:
        return self.content.metadata

    @property
    def metadata(self) -> Mapping[str, Any]:
        """Read-only view of the metadata section, extensions namespaced by dialect."""
        section = self.content.metadata
        if section is None:
            return MappingProxyType({})
        return MappingProxyType(section.to_dict()["data"])

    @property
    def title(self) -> str:
        section = self.content.metadata
        return section.title if section and section.title else self.name

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "author": self.author.to_dict() if self.author else None,
            "tags": sorted(self.tags),
            "format": self.format.value,
            "subtype": self.subtype.value,
            "sourceFormat": self.source_format,
            "license": self.license,
            "repository": self.repository,
            "homepage": self.homepage,
            "category": self.category,
            "keywords": list(self.keywords),
            "metadata": dict(self.metadata),
            "content": self.content.to_dict(),
        }
        return _compact(data) | {"description": self.description, "tags": sorted(self.tags)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CanonicalPackage":
        content = data.get("content") or {}
        sections = tuple(section_from_dict(s) for s in content.get("sections") or ())
        return cls(
            id=str(data.get("id") or data.get("name") or ""),
            name=str(data.get("name") or data.get("id") or ""),
            version=str(data.get("version") or "1.0.0"),
            description=str(data.get("description") or ""),
            author=Author.coerce(data.get("author")),
            content=CanonicalContent(
                sections=sections,
                format=content.get("format", "canonical"),
                version=content.get("version", CANONICAL_VERSION),
            ),
            format=Format(data.get("format", Format.GENERIC.value)),
            subtype=Subtype(data.get("subtype", Subtype.RULE.value)),
            tags=frozenset(data.get("tags") or ()),
            source_format=data.get("sourceFormat"),
            license=data.get("license"),
            repository=data.get("repository"),
            homepage=data.get("homepage"),
            category=data.get("category"),
            keywords=tuple(data.get("keywords") or ()),
        )


# =============================================================================
# CONVERSION RESULT & OPTIONS
# =============================================================================


@dataclass(frozen=True)
class ConversionResult:
    content: str
    format: str
    warnings: Tuple[str, ...] = ()
    validation_errors: Tuple[str, ...] = ()
    lossy_conversion: bool = False
    quality_score: int = 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "format": self.format,
            "warnings": list(self.warnings),
            "validationErrors": list(self.validation_errors),
            "lossyConversion": self.lossy_conversion,
            "qualityScore": self.quality_score,
        }


@dataclass(frozen=True)
class ConversionOptions:
    """Serializer knobs. Values set here override what the package carries."""

    cursor_globs: Optional[List[str]] = None
    always_apply: Optional[bool] = None
    kiro_inclusion: Optional[str] = None
    kiro_file_match_pattern: Optional[str] = None
    copilot_apply_to: Optional[str] = None
    penalties: Optional[Any] = None
