"""
Signage Compliance CLI
========================
Command-line interface for the parking signage compliance system.

Commands:
    check      — Check sign JSON documents against the BPA Code of Practice
    rules      — List the rulebook, optionally for one sign type
    templates  — List the sign template catalog
    reference  — Mint a sign reference number
    create     — Create a sign from a template and write it as JSON
    serve      — Run the JSON-RPC tool server on stdin/stdout
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from signage_compliance import __version__
from signage_compliance.config import get_settings
from signage_compliance.errors import SignageError
from signage_compliance.signs.models import SIGN_TYPES
from signage_compliance.utils.log import get_logger, setup_logging

logger = get_logger(__name__)
console = Console()


# ═══════════════════════════════════════════════════════
#  Root group
# ═══════════════════════════════════════════════════════
@click.group()
@click.version_option(version=__version__, prog_name="signage-compliance")
@click.option("--log-level", default=None, help="Override LOG_LEVEL (DEBUG, INFO, WARNING…).")
def main(log_level: str | None):
    """Parking signage compliance checker (BPA Code of Practice)."""
    settings = get_settings()
    setup_logging(log_level or settings.log_level, settings.paths.log_dir / "signage.log")


# ═══════════════════════════════════════════════════════
#  CHECK — check sign documents for compliance
# ═══════════════════════════════════════════════════════
@main.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option("--report/--no-report", default=False, help="Write Markdown + JSON reports.")
@click.option(
    "--output-dir", "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Report directory. Default: config value.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the raw JSON report(s) instead of tables.")
@click.option("--strict", is_flag=True, help="Exit with status 1 if any sign is non-compliant.")
def check(paths: tuple[Path, ...], report: bool, output_dir: Path | None, as_json: bool, strict: bool):
    """Check sign JSON documents for BPA compliance."""
    from signage_compliance.compliance.checker import get_engine
    from signage_compliance.reporting.report import generate_report
    from signage_compliance.signs.models import Sign

    sign_files: list[Path] = []
    for p in paths:
        if p.is_dir():
            sign_files.extend(sorted(p.glob("*.json")))
        else:
            sign_files.append(p)
    sign_files = list(dict.fromkeys(sign_files))

    if not sign_files:
        console.print("[red]No sign JSON files found.[/red]")
        sys.exit(1)

    engine = get_engine()
    checked = []
    for path in sign_files:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to read %s: %s", path, e)
            console.print(f"  [red]✗[/red] {path.name}: {e}")
            continue

        sign = Sign.from_dict(raw)
        result = engine.evaluate(sign)
        checked.append((path, sign, result))

        if report:
            md_path, _ = generate_report(result, sign, output_dir)
            console.print(f"  [green]✓[/green] Report: {md_path}")

    if not checked:
        sys.exit(1)

    if as_json:
        payload = [r.to_dict() for _, _, r in checked]
        click.echo(json.dumps(payload[0] if len(payload) == 1 else payload, indent=2, ensure_ascii=False))
    else:
        for path, sign, result in checked:
            _print_rule_table(path.name, result)
        _print_results_table(checked)

    if strict and not all(r.compliant for _, _, r in checked):
        sys.exit(1)


def _print_rule_table(title: str, result):
    table = Table(title=title, show_lines=False)
    table.add_column("Rule", style="bold", no_wrap=True)
    table.add_column("Category", style="cyan")
    table.add_column("Result", justify="center")
    table.add_column("Message")

    for r in result.results:
        if r.passed:
            status = "[green]PASS[/green]"
        elif r.required:
            status = "[red]FAIL[/red]"
        else:
            status = "[yellow]WARN[/yellow]"
        table.add_row(r.rule_id, r.category, status, r.message)

    console.print()
    console.print(table)


def _print_results_table(checked):
    """Display a rich summary table of results."""
    table = Table(title="Compliance Summary", show_lines=True)
    table.add_column("Sign", style="bold", no_wrap=True)
    table.add_column("Type", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Score", justify="right")
    table.add_column("Pass", justify="right", style="green")
    table.add_column("Fail", justify="right", style="red")
    table.add_column("Warn", justify="right", style="yellow")

    for path, sign, r in checked:
        status = "[green]COMPLIANT[/green]" if r.compliant else "[red]NON-COMPLIANT[/red]"
        table.add_row(
            sign.reference or path.stem,
            sign.type or "?",
            status,
            f"{r.score}%",
            str(r.summary.passed),
            str(r.summary.failed),
            str(r.summary.warnings),
        )

    console.print()
    console.print(table)


# ═══════════════════════════════════════════════════════
#  RULES — list the rulebook
# ═══════════════════════════════════════════════════════
@main.command()
@click.option("--type", "-t", "sign_type", type=click.Choice(SIGN_TYPES), default=None, help="Only rules for this sign type.")
def rules(sign_type: str | None):
    """List BPA rules, optionally only those applying to a sign type."""
    from signage_compliance.compliance.rules import get_rulebook

    rulebook = get_rulebook()
    selected = rulebook.applicable(sign_type) if sign_type else tuple(rulebook)

    title = f"{rulebook.standard} {rulebook.version}"
    if sign_type:
        title += f" — {sign_type}"
    table = Table(title=title, show_lines=False)
    table.add_column("ID", style="bold", no_wrap=True)
    table.add_column("Name")
    table.add_column("Category", style="cyan")
    table.add_column("Applies to", style="dim")

    for rule in selected:
        applies = ", ".join(sorted(rule.sign_types)) if rule.sign_types else "all"
        table.add_row(rule.id, rule.name, rule.category, applies)

    console.print(table)
    console.print(f"[dim]{len(selected)} rule(s)[/dim]")


# ═══════════════════════════════════════════════════════
#  TEMPLATES — list the template catalog
# ═══════════════════════════════════════════════════════
@main.command()
@click.option("--type", "-t", "sign_type", type=click.Choice(SIGN_TYPES), default=None, help="Filter by sign type.")
def templates(sign_type: str | None):
    """List available sign templates."""
    from signage_compliance.signs.templates import get_catalog

    catalog = get_catalog()
    selected = catalog.by_type(sign_type) if sign_type else list(catalog)

    table = Table(title="Sign Templates", show_lines=False)
    table.add_column("ID", style="bold", no_wrap=True)
    table.add_column("Type", style="cyan")
    table.add_column("Elements", justify="right")
    table.add_column("Description")

    for t in selected:
        table.add_row(t.id, t.type, str(len(t.elements)), t.description)

    console.print(table)


# ═══════════════════════════════════════════════════════
#  REFERENCE — mint a reference number
# ═══════════════════════════════════════════════════════
@main.command()
@click.argument("site_code")
@click.argument("sign_type")
@click.argument("sequence", type=click.IntRange(min=1))
@click.option("--version", "-v", "version", type=click.IntRange(min=1), default=1, help="Reference version.")
def reference(site_code: str, sign_type: str, sequence: int, version: int):
    """Print the reference for SITE_CODE / SIGN_TYPE / SEQUENCE."""
    from signage_compliance.signs.reference import make_reference

    click.echo(make_reference(site_code, sign_type, sequence, version))


# ═══════════════════════════════════════════════════════
#  CREATE — instantiate a template
# ═══════════════════════════════════════════════════════
@main.command()
@click.argument("template_id")
@click.option("--site-code", "-s", required=True, help="Site code, e.g. KRS.")
@click.option("--site-name", "-n", required=True, help="Full site name.")
@click.option("--company-name", default=None, help="Operator company name.")
@click.option("--company-reg-number", default=None, help="Company registration number.")
@click.option("--helpline", "helpline_number", default=None, help="Helpline phone number.")
@click.option("--parking-charge", type=int, default=None, help="Parking charge in GBP (max 100).")
@click.option("--reduced-charge", type=int, default=None, help="Reduced charge in GBP (max 60).")
@click.option("--anpr/--no-anpr", default=True, help="Whether the site uses ANPR.")
@click.option("--sequence", type=click.IntRange(min=1), default=None, help="Sequence number. Default: 1.")
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output JSON file. Default: <sign_dir>/<reference>.json.",
)
def create(
    template_id: str,
    site_code: str,
    site_name: str,
    company_name: str | None,
    company_reg_number: str | None,
    helpline_number: str | None,
    parking_charge: int | None,
    reduced_charge: int | None,
    anpr: bool,
    sequence: int | None,
    output: Path | None,
):
    """Create a sign from TEMPLATE_ID and write it as JSON."""
    from signage_compliance.signs.registry import create_sign

    overrides = {
        "companyName": company_name,
        "companyRegNumber": company_reg_number,
        "helplineNumber": helpline_number,
        "parkingCharge": parking_charge,
        "reducedCharge": reduced_charge,
        "hasAnpr": anpr,
    }
    try:
        created = create_sign(
            template_id,
            site_code,
            site_name,
            sequence=sequence,
            **{k: v for k, v in overrides.items() if v is not None},
        )
    except SignageError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    sign = created.sign
    if output is None:
        settings = get_settings()
        settings.ensure_dirs()
        output = settings.paths.sign_dir / f"{sign.reference}.json"
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(sign.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")

    color = "green" if created.report.compliant else "yellow"
    console.print(f"[{color}]{created.message}[/{color}]")
    console.print(f"[dim]Written to {output}[/dim]")


# ═══════════════════════════════════════════════════════
#  SERVE — JSON-RPC over stdio
# ═══════════════════════════════════════════════════════
@main.command()
def serve():
    """Run the JSON-RPC tool server on stdin/stdout."""
    from signage_compliance.rpc.server import serve_stdio

    serve_stdio()


if __name__ == "__main__":
    main()
