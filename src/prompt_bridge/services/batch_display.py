"""
Display formatting for 'prompt-bridge convert' output.
Separated from the conversion logic for testability.
"""

from prompt_bridge.services.batch_service import BatchReport
from prompt_bridge.utils import Colors


def display_batch(report: BatchReport, verbose: bool = False) -> None:
    """Print one line per converted file, then totals."""
    for outcome in report.outcomes:
        source = outcome.job.source
        if not outcome.ok:
            print(f"   {Colors.RED}✗{Colors.ENDC} {str(source):<30} {outcome.error}")
            continue

        result = outcome.result
        if result.validation_errors:
            symbol = f"{Colors.RED}✗{Colors.ENDC}"
        elif result.lossy_conversion:
            symbol = f"{Colors.YELLOW}⚠{Colors.ENDC}"
        else:
            symbol = f"{Colors.GREEN}✓{Colors.ENDC}"
        lossy = f" {Colors.YELLOW}(lossy){Colors.ENDC}" if result.lossy_conversion else ""
        print(
            f"   {symbol} {str(source):<30} -> {outcome.output_path} "
            f"(score {result.quality_score}, {len(result.warnings)} warnings){lossy}"
        )
        if verbose:
            for warning in result.warnings:
                print(f"       {Colors.YELLOW}- {warning}{Colors.ENDC}")
            for error in result.validation_errors:
                print(f"       {Colors.RED}- {error}{Colors.ENDC}")

    total = len(report.outcomes)
    ok = len(report.succeeded)
    summary = f"\n{Colors.BOLD}{ok}/{total} converted{Colors.ENDC}"
    if report.average_score is not None:
        summary += f", average score {report.average_score:.0f}"
    print(summary)
    if report.stopped:
        print(f"{Colors.YELLOW}Stopped after the first failure.{Colors.ENDC}")
