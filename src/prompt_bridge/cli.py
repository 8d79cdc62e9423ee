import argparse
import logging
import sys
from pathlib import Path

import questionary
from questionary import Style

from .config import load_settings
from .converters import to_canonical_json
from .core.converter import converter_registry
from .errors import ParseError, UnknownFormatError
from .models import ConversionOptions, PackageMetadata
from .services import ConversionJob, convert_batch, display_batch, package_id_for
from .utils import (
    Colors,
    ask_user,
    print_error,
    print_info,
    print_success,
    safe_read_text,
    validate_path_within_project,
    write_text,
)
from .validation import KIRO_INCLUSION_MODES

# Questionary style without the default highlighted background
CUSTOM_STYLE = Style([
    ('qmark', 'fg:#00d4ff bold'),
    ('question', 'bold'),
    ('answer', 'fg:#00d4ff bold'),
    ('pointer', 'fg:#00d4ff bold'),
    ('highlighted', 'fg:#00d4ff bold bg:default'),
    ('selected', 'fg:#00d4ff bold bg:default'),
])

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def main(argv=None) -> int:
    """Entry point. Returns the process exit status."""
    try:
        return _main_inner(argv)
    except KeyboardInterrupt:
        print(f"\n{Colors.YELLOW}Cancelled.{Colors.ENDC}")
        return 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prompt-bridge",
        description="Prompt Bridge - Convert AI assistant configuration between dialects",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug logging and every warning")
    parser.add_argument("--config", type=Path, default=None, help="Settings file (default: ~/.config/prompt-bridge/config.json)")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # Convert Subcommand
    convert_parser = subparsers.add_parser("convert", help="Convert files from one dialect to another")
    convert_parser.add_argument("files", nargs="+", type=Path, help="Source files")
    convert_parser.add_argument("--from", dest="source", required=True, help="Source dialect")
    convert_parser.add_argument("--to", dest="target", default=None, help="Target dialect (prompted when omitted)")
    convert_parser.add_argument("--output", "-o", type=Path, default=Path("."), help="Project root to write into")
    convert_parser.add_argument("--force", "-f", action="store_true", help="Overwrite existing files without prompt")
    convert_parser.add_argument("--stdout", action="store_true", help="Print converted content instead of writing files")
    convert_parser.add_argument("--stop-on-error", action="store_true", help="Stop at the first file that fails to parse")
    convert_parser.add_argument("--workers", type=int, default=None, help="Parallel conversions")
    convert_parser.add_argument("--globs", default=None, help="Cursor globs, comma separated")
    convert_parser.add_argument("--always-apply", action="store_true", default=None, help="Cursor/Continue alwaysApply")
    convert_parser.add_argument("--kiro-inclusion", choices=KIRO_INCLUSION_MODES, default=None, help="Kiro inclusion mode")
    convert_parser.add_argument("--kiro-pattern", default=None, help="Kiro fileMatchPattern")
    convert_parser.add_argument("--apply-to", default=None, help="Copilot applyTo glob")

    # Formats Subcommand
    subparsers.add_parser("formats", help="List supported dialects")

    # Inspect Subcommand
    inspect_parser = subparsers.add_parser("inspect", help="Print the canonical JSON of a file")
    inspect_parser.add_argument("file", type=Path, help="Source file")
    inspect_parser.add_argument("--from", dest="source", required=True, help="Source dialect")

    return parser


def _main_inner(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format=LOG_FORMAT)
    settings = load_settings(args.config)

    try:
        if args.command == "convert":
            return _convert(args, settings)
        if args.command == "formats":
            return _formats()
        if args.command == "inspect":
            return _inspect(args, settings)
    except UnknownFormatError as e:
        print_error(str(e))
        return 1

    parser.print_help()
    return 0


# =============================================================================
# COMMANDS
# =============================================================================


def _formats() -> int:
    print(f"{Colors.BLUE}📂 Supported Formats:{Colors.ENDC}")
    for converter in converter_registry.all():
        info = converter.format_info
        status = "" if info.status == "stable" else f" [{info.status}]"
        print(f"  - {Colors.YELLOW}{info.name}{Colors.ENDC}: {info.display_name} ({info.output_dir}/*{info.extension}){status}")
    return 0


def _inspect(args, settings) -> int:
    converter = converter_registry.require(args.source)
    content = safe_read_text(args.file)
    if content is None:
        print_error(f"Could not read {args.file}")
        return 1
    try:
        pkg = converter.parse(content, PackageMetadata(id=package_id_for(args.file), author=settings.author))
    except ParseError as e:
        print_error(str(e))
        return 1
    print(to_canonical_json(pkg), end="")
    return 0


def _select_target(source: str):
    choices = [
        questionary.Choice(f"{c.format_info.display_name} ({c.format_info.name})", value=c.format_info.name)
        for c in converter_registry.all()
        if c.format_info.name != source
    ]
    return questionary.select("Convert to:", choices=choices, style=CUSTOM_STYLE).ask()


def _options(args, settings) -> ConversionOptions:
    globs = [g.strip() for g in args.globs.split(",") if g.strip()] if args.globs else None
    return ConversionOptions(
        cursor_globs=globs,
        always_apply=args.always_apply,
        kiro_inclusion=args.kiro_inclusion,
        kiro_file_match_pattern=args.kiro_pattern,
        copilot_apply_to=args.apply_to,
        penalties=settings.penalties,
    )


def _convert(args, settings) -> int:
    source = converter_registry.require(args.source).format_info.name
    target = args.target or settings.default_target or _select_target(source)
    if not target:
        print(f"{Colors.YELLOW}Cancelled.{Colors.ENDC}")
        return 1
    target = converter_registry.require(target).format_info.name

    jobs = [ConversionJob(path, source, target, author=settings.author) for path in args.files]
    report = convert_batch(
        jobs,
        _options(args, settings),
        max_workers=args.workers or settings.max_workers,
        stop_on_error=args.stop_on_error,
    )

    if args.stdout:
        for outcome in report.succeeded:
            print(outcome.result.content, end="")
        for outcome in report.failed:
            print(f"✗ {outcome.error}", file=sys.stderr)
    else:
        print(f"{Colors.CYAN}🔄 Converting {len(jobs)} file(s) from {source} to {target}...{Colors.ENDC}\n")
        display_batch(report, verbose=args.verbose)
        _write_outputs(report, args.output, args.force)

    return 1 if report.failed else 0


def _write_outputs(report, root: Path, force: bool) -> None:
    for outcome in report.succeeded:
        dest = root / outcome.output_path
        if not validate_path_within_project(dest, root):
            print_error(f"Refusing to write outside {root}: {dest}")
            continue
        if dest.exists() and not force and not ask_user(f"{dest} exists. Overwrite?", default=False):
            print_info(f"Skipped {dest}")
            continue
        write_text(dest, outcome.result.content)
        print_success(f"Wrote {dest}")


if __name__ == "__main__":
    sys.exit(main())
