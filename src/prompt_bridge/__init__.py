"""
Prompt Bridge - Convert AI assistant configuration between dialects.

Every supported dialect is parsed into one canonical package and serialized
back out from it:
- Claude Code (.claude/)
- Cursor (.cursor/rules/*.mdc)
- Continue (.continue/)
- Windsurf (.windsurf/rules/)
- GitHub Copilot (.github/)
- Kiro steering and agents (.kiro/)
- Ruler (.ruler/)
- Gemini CLI (.gemini/commands/*.toml)
- Factory Droid (.factory/)
- OpenCode (.opencode/)
- AGENTS.md
"""

__version__ = "1.0.0"

# Trigger converter auto-registration on import
from prompt_bridge import converters  # noqa: F401

__all__ = [
    "cli",
    "config",
    "converters",
    "core",
    "models",
    "services",
    "utils",
]
