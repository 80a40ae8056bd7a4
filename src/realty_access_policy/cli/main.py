"""CLI entry point for realty-access-policy.

Invoked as::

    realty-access [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m realty_access_policy.cli.main

Commands
--------
- check        Evaluate one request against the policy table
- validate     Validate an offer, negotiation or document record
- collections  List the governed collections
- levels       Show the AGENT / CLIENT / PUBLIC permission levels
- audit show   Display recent access decisions
- version      Show version information
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()
err_console = Console(stderr=True)

_DEFAULT_CONFIG = Path("realty_access.yaml")


def _parse_record(raw: str | None, label: str) -> dict[str, object] | None:
    """Parse a JSON object option, exiting with status 1 on bad input."""
    if raw is None:
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        err_console.print(f"[red]Invalid JSON for {label}:[/red] {exc}")
        sys.exit(1)
    if not isinstance(value, dict):
        err_console.print(f"[red]{label} must be a JSON object.[/red]")
        sys.exit(1)
    return value


def _violations_table(violations: list[object]) -> Table:
    table = Table(title="Schema Violations", box=box.SIMPLE)
    table.add_column("Field", style="cyan")
    table.add_column("Code", style="magenta")
    table.add_column("Message")
    for violation in violations:
        table.add_row(violation.field, violation.code.value, violation.message)  # type: ignore[attr-defined]
    return table


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="realty-access-policy")
def cli() -> None:
    """Realty Access CLI — policy checks, record validation and audit tools."""


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from realty_access_policy import __version__

    console.print(
        Panel(
            f"[bold]realty-access-policy[/bold]  v[cyan]{__version__}[/cyan]\n"
            "Access control for real-estate offers, negotiations and documents.",
            title="Version",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.option("--collection", "-C", required=True, help="Collection name, e.g. 'offers'.")
@click.option(
    "--operation",
    "-o",
    required=True,
    type=click.Choice(["create", "read", "update", "delete"]),
    help="Requested operation.",
)
@click.option(
    "--principal",
    "-p",
    "principal_id",
    default=None,
    help="Principal id; omit for an unauthenticated request.",
)
@click.option(
    "--profiles",
    "profiles_path",
    default=None,
    type=click.Path(exists=True),
    help="YAML file of user profiles.",
)
@click.option("--existing", "existing_json", default=None, help="Stored record as a JSON object.")
@click.option("--proposed", "proposed_json", default=None, help="Proposed data as a JSON object.")
@click.option("--resource-id", default=None, help="Document id of the record (users collection).")
@click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    type=click.Path(exists=True),
    help="Path to realty_access.yaml.",
)
def check_command(
    collection: str,
    operation: str,
    principal_id: str | None,
    profiles_path: str | None,
    existing_json: str | None,
    proposed_json: str | None,
    resource_id: str | None,
    config_path: str | None,
) -> None:
    """Evaluate one request and print the decision.

    Exits 0 when allowed and 1 when denied.
    """
    from realty_access_policy.audit.logger import DecisionLogger
    from realty_access_policy.config.loader import ConfigLoader
    from realty_access_policy.identity.loader import ProfileConfigError, ProfileLoader
    from realty_access_policy.identity.resolver import InMemoryIdentityResolver
    from realty_access_policy.policies.engine import PolicyEngine

    existing = _parse_record(existing_json, "--existing")
    proposed = _parse_record(proposed_json, "--proposed")

    try:
        loader = ConfigLoader()
        config = loader.load(Path(config_path)) if config_path else loader.defaults()
        profiles_file = Path(profiles_path) if profiles_path else config.profiles_file
        if profiles_file is not None:
            resolver = ProfileLoader().load(profiles_file)
        elif principal_id is None:
            # Unauthenticated requests never consult a profile.
            resolver = InMemoryIdentityResolver()
        else:
            err_console.print("[red]Provide --profiles or a config with profiles_file.[/red]")
            sys.exit(1)
    except (FileNotFoundError, ProfileConfigError, ValueError) as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)

    engine = PolicyEngine(
        resolver=resolver,
        decision_logger=(
            DecisionLogger(config.audit.log_path) if config.audit.enabled else None
        ),
        strict_offers=config.validation.strict_offers,
        deny_message=config.deny_message,
    )

    decision = engine.evaluate(
        collection, operation, principal_id, existing, proposed, resource_id=resource_id
    )

    status_str = "[green]ALLOWED[/green]" if decision.allowed else "[red]DENIED[/red]"
    console.print(Panel(status_str, title="Access Decision", border_style="blue"))
    console.print(f"  Request: [cyan]{operation}[/cyan] on [cyan]{collection}[/cyan]")
    console.print(f"  Principal: {principal_id or '<unauthenticated>'}")

    if not decision.allowed:
        console.print(f"  Denial: [bold red]{decision.denial.value}[/bold red]")  # type: ignore[union-attr]
        console.print(f"  Failed condition: [bold red]{decision.failed_condition}[/bold red]")
        if decision.violations:
            console.print(_violations_table(list(decision.violations)))

    sys.exit(0 if decision.allowed else 1)


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.option(
    "--kind",
    "-k",
    required=True,
    type=click.Choice(["offer", "negotiation", "document"]),
    help="Record kind to validate against.",
)
@click.option("--data", "-d", "data_json", required=True, help="Record as a JSON object.")
@click.option("--strict", is_flag=True, default=False, help="Apply the extended offer rules.")
def validate_command(kind: str, data_json: str, strict: bool) -> None:
    """Validate a record against its schema.  Exits 1 when invalid."""
    from realty_access_policy.schemas.validators import validate

    data = _parse_record(data_json, "--data")
    report = validate(kind, data, strict=strict)

    if report.valid:
        console.print(f"[green]VALID[/green] {kind} record")
        sys.exit(0)

    console.print(f"[red]INVALID[/red] {kind} record: {len(report.violations)} violation(s)")
    console.print(_violations_table(list(report.violations)))
    sys.exit(1)


# ---------------------------------------------------------------------------
# collections
# ---------------------------------------------------------------------------


@cli.command(name="collections")
@click.option("--strict-offers", is_flag=True, default=False, help="Show the strict offer table.")
def collections_command(strict_offers: bool) -> None:
    """List governed collections and the first condition of each rule."""
    from realty_access_policy.policies.table import Operation, build_policy_table

    policy_table = build_policy_table(strict_offers=strict_offers)

    table = Table(title="Governed Collections", box=box.SIMPLE)
    table.add_column("Collection", style="cyan")
    table.add_column("Family", style="magenta")
    for operation in Operation:
        table.add_column(operation.value.capitalize())

    for name, policy in policy_table.items():
        table.add_row(
            name,
            policy.family.value,
            *(_describe(policy.condition_for(op)) for op in Operation),
        )

    console.print(table)
    console.print(f"  Collections: [cyan]{len(policy_table)}[/cyan]")


def _describe(condition: object) -> str:
    members = getattr(condition, "conditions", None)
    if members is None:
        return str(getattr(condition, "name", ""))
    return " & ".join(str(getattr(member, "name", "")) for member in members)


# ---------------------------------------------------------------------------
# levels
# ---------------------------------------------------------------------------


@cli.command(name="levels")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print raw JSON.")
def levels_command(as_json: bool) -> None:
    """Show the permission levels offered to user interfaces."""
    from realty_access_policy.policies.levels import permission_levels

    levels = permission_levels()
    if as_json:
        click.echo(json.dumps(levels, indent=2))
        return

    table = Table(title="Permission Levels", box=box.SIMPLE)
    table.add_column("Level", style="cyan")
    table.add_column("Collections")
    table.add_column("Permissions", style="magenta")
    for name, level in levels.items():
        table.add_row(name, ", ".join(level["collections"]), ", ".join(level["permissions"]))
    console.print(table)


# ---------------------------------------------------------------------------
# audit group
# ---------------------------------------------------------------------------


@cli.group(name="audit")
def audit_group() -> None:
    """Decision audit trail commands."""


@audit_group.command(name="show")
@click.option("--last", "-n", default=20, show_default=True, type=int, help="Number of recent entries to show.")
@click.option("--denied-only", is_flag=True, default=False, help="Only show denied requests.")
@click.option(
    "--config",
    "-c",
    "config_path",
    default=str(_DEFAULT_CONFIG),
    type=click.Path(),
    help="Path to realty_access.yaml.",
)
def audit_show_command(last: int, denied_only: bool, config_path: str) -> None:
    """Show recent access decisions."""
    from realty_access_policy.audit.logger import DecisionLogger
    from realty_access_policy.config.loader import ConfigLoader

    loader = ConfigLoader()
    cfg_path = Path(config_path)
    if cfg_path.exists():
        config = loader.load(cfg_path)
    else:
        config = loader.defaults()

    audit = DecisionLogger(log_path=config.audit.log_path)
    if denied_only:
        denials = audit.denials()
        records = denials[-last:] if last > 0 else []
    else:
        records = audit.last_n(last)

    if not records:
        console.print("[yellow]No audit entries found.[/yellow]")
        return

    table = Table(title=f"Last {last} Access Decisions", box=box.SIMPLE)
    table.add_column("Timestamp", style="dim", no_wrap=True)
    table.add_column("Principal", style="cyan")
    table.add_column("Request")
    table.add_column("Result", style="bold")
    table.add_column("Condition", style="magenta")

    for record in records:
        ts = str(record.get("timestamp", ""))[:19].replace("T", " ")
        request = f"{record.get('operation', '')} {record.get('collection', '')}"
        result = "[green]allow[/green]" if record.get("allowed") else "[red]deny[/red]"
        table.add_row(
            ts,
            str(record.get("principal_id") or "-"),
            request,
            result,
            str(record.get("failed_condition") or ""),
        )

    console.print(table)
    console.print(f"  Total audit records: [cyan]{audit.count()}[/cyan]")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    cli()
