import logging
from pathlib import Path
from typing import Optional

# Configure module logger
logger = logging.getLogger("prompt_bridge")


# ANSI colors
class Colors:
    HEADER = "\033[95m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    BOLD = "\033[1m"
    ENDC = "\033[0m"


def ask_user(question: str, default: bool = True) -> bool:
    """
    Prompts the user with a yes/no question.
    """
    choices = " [Y/n]: " if default else " [y/N]: "
    while True:
        print(f"{Colors.YELLOW}❓ {question}{choices}{Colors.ENDC}", end="", flush=True)
        try:
            choice = input().strip().lower()
        except EOFError:
            return default
        if not choice:
            return default
        if choice in ["y", "yes"]:
            return True
        if choice in ["n", "no"]:
            return False


# =============================================================================
# OUTPUT HELPERS
# =============================================================================


def print_success(text: str) -> None:
    print(f"  {Colors.GREEN}✓{Colors.ENDC} {text}")


def print_error(text: str) -> None:
    print(f"  {Colors.RED}✗{Colors.ENDC} {text}")


def print_info(text: str) -> None:
    print(f"  ℹ {text}")


# =============================================================================
# FILE UTILITIES
# =============================================================================


def validate_path_within_project(path: Path, project_root: Path = None) -> bool:
    """
    Validate that a path stays within the project root.
    Prevents path traversal through names like ``../../etc/passwd``.
    """
    project_root = project_root or Path.cwd()
    try:
        return path.resolve().is_relative_to(project_root.resolve())
    except (OSError, ValueError):
        return False


def safe_read_text(path: Path, encoding: str = "utf-8") -> Optional[str]:
    """
    Read a text file with encoding fallback.
    Returns None if the file cannot be read.
    """
    for enc in [encoding, "utf-8-sig", "latin-1"]:
        try:
            return path.read_text(encoding=enc)
        except UnicodeDecodeError:
            continue
        except OSError as e:
            logger.warning("Error reading %s: %s", path, e)
            return None
    logger.warning("Could not decode %s with any known encoding", path)
    return None


def write_text(path: Path, content: str) -> None:
    """Write ``content``, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
