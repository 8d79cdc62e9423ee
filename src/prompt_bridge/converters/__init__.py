"""
Dialect converters.

Importing this package registers every converter with
``prompt_bridge.core.converter_registry``.
"""

from .agents_md import from_agents_md, to_agents_md
from .aider import from_aider, to_aider
from .canonical import from_canonical, to_canonical, to_canonical_json
from .claude import from_claude, to_claude
from .continuedev import from_continue, to_continue
from .copilot import from_copilot, to_copilot
from .cursor import from_cursor, to_cursor
from .droid import from_droid, to_droid
from .gemini import from_gemini, to_gemini
from .kiro import from_kiro, to_kiro
from .kiro_agent import from_kiro_agent, to_kiro_agent
from .opencode import from_opencode, to_opencode
from .ruler import from_ruler, parse_ruler, to_ruler
from .trae import from_trae, to_trae
from .windsurf import from_windsurf, to_windsurf
from .zencoder import from_zencoder, to_zencoder

__all__ = [
    "from_agents_md",
    "from_aider",
    "from_canonical",
    "from_claude",
    "from_continue",
    "from_copilot",
    "from_cursor",
    "from_droid",
    "from_gemini",
    "from_kiro",
    "from_kiro_agent",
    "from_opencode",
    "from_ruler",
    "from_trae",
    "from_windsurf",
    "from_zencoder",
    "parse_ruler",
    "to_agents_md",
    "to_aider",
    "to_canonical",
    "to_canonical_json",
    "to_claude",
    "to_continue",
    "to_copilot",
    "to_cursor",
    "to_droid",
    "to_gemini",
    "to_kiro",
    "to_kiro_agent",
    "to_opencode",
    "to_ruler",
    "to_trae",
    "to_windsurf",
    "to_zencoder",
]
