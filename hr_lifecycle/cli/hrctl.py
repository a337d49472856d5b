#!/usr/bin/env python3
"""
HR Control CLI - Command Line Interface for the HR Lifecycle Engine.

Provides commands for rendering Google Docs to HTML, running the onboarding,
offboarding, attestation and before-first-day workflows, viewing the audit
trail and starting the API server.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..audit import AuditLogger
from ..connectors import create_connectors
from ..engine import load_settings
from ..models import WorkflowResult
from ..rendering import document_to_html
from ..workflows import (
    BeforeFirstDayWorkflow,
    OffboardingWorkflow,
    OnboardingWorkflow,
    TrainingAttestationWorkflow,
)

# Setup logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Rich console for pretty output
console = Console()

OFFBOARD_CONFIRMATION = "OFFBOARD"


class HRController:
    """Main controller for HR Lifecycle Engine operations."""

    def __init__(self, config_path: Optional[str] = None, mock_mode: bool = True):
        """Initialize the controller from a settings file and the mock flag."""
        self.config_path = Path(config_path) if config_path else None
        self.mock_mode = mock_mode

        self.settings = load_settings(self.config_path, overrides={"mock_mode": mock_mode})
        self.audit_logger = AuditLogger(self.settings.audit_dir)
        self._connectors = None

        logger.debug(f"HR Lifecycle Engine initialized (mock_mode={mock_mode})")

    @property
    def connectors(self):
        """Connectors are built on first use so ``render`` needs no credentials."""
        if self._connectors is None:
            config = self.settings.credentials.model_dump()
            config["retry"] = self.settings.retry.model_dump()
            self._connectors = create_connectors(config, mock=self.mock_mode)
        return self._connectors

    def workflow(self, workflow_class, **kwargs: Any):
        return workflow_class(
            settings=self.settings,
            connectors=self.connectors,
            audit_logger=self.audit_logger,
            **kwargs,
        )


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False), help='Path to a YAML or JSON settings file')
@click.option('--mock/--real', default=True, help='Use mock mode (default) or real Google API connections')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, config, mock, verbose):
    """HR Lifecycle Engine Control CLI - Google Workspace HR automation"""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    ctx.ensure_object(dict)
    try:
        ctx.obj['controller'] = HRController(config, mock)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Could not load settings: {e}") from e


@cli.command()
@click.argument('doc_json', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write the HTML to a file instead of stdout')
@click.pass_context
def render(ctx, doc_json, output):
    """Render a Google Docs document (documents.get JSON) to HTML."""
    controller = ctx.obj['controller']

    try:
        with open(doc_json, encoding='utf-8') as f:
            document = json.load(f)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{doc_json} is not valid JSON: {e}") from e

    html = document_to_html(document, controller.settings.converter, logger)

    if output:
        Path(output).write_text(html, encoding='utf-8')
        console.print(f"[green]✓ Wrote {len(html)} characters to {output}[/green]")
    else:
        click.echo(html)


@cli.command()
@click.argument('row', type=click.IntRange(min=2))
@click.pass_context
def onboard(ctx, row):
    """Onboard the employee in personnel sheet ROW."""
    controller = ctx.obj['controller']

    console.print(f"[blue]Running onboarding for row {row}[/blue]")
    result = controller.workflow(OnboardingWorkflow).execute(row)
    display_workflow_results(result)
    if result.success:
        console.print("Check drafts for the Name Tag and Welcome emails.")
    ctx.exit(0 if result.success else 1)


@cli.command()
@click.argument('row', type=click.IntRange(min=2))
@click.option('--yes', is_flag=True, help='Skip the typed confirmation')
@click.pass_context
def offboard(ctx, row, yes):
    """Offboard the employee in personnel sheet ROW."""
    controller = ctx.obj['controller']

    if not yes:
        console.print(Panel.fit(
            f"Offboarding row {row} will:\n"
            "- Mark the employee inactive\n"
            "- Remove them from their groups\n"
            "- Remove their folder access and archive their folder",
            title="Confirm offboarding",
        ))
        answer = click.prompt(f"Enter '{OFFBOARD_CONFIRMATION}' to confirm", default="", show_default=False)
        if answer.strip() != OFFBOARD_CONFIRMATION:
            console.print("[yellow]Offboarding cancelled[/yellow]")
            return

    result = controller.workflow(OffboardingWorkflow).execute(row)
    display_workflow_results(result)
    ctx.exit(0 if result.success else 1)


@cli.command()
@click.argument('kind', type=click.Choice(['osha', 'hipaa'], case_sensitive=False))
@click.pass_context
def attest(ctx, kind):
    """Send the OSHA or HIPAA training attestation to all active employees."""
    controller = ctx.obj['controller']

    console.print(f"[blue]Sending {kind.upper()} attestations...[/blue]")
    result = controller.workflow(TrainingAttestationWorkflow, kind=kind).execute()

    summary = result.summary
    if summary:
        console.print(f"[bold]{summary['kind']} Attestation Email Summary[/bold]")
        console.print(f"Successfully sent: {summary['sent']}")
        console.print(f"Skipped or failed: {summary['failed']}")
    display_workflow_results(result)
    ctx.exit(0 if result.success else 1)


@cli.command('before-first-day')
@click.argument('row', type=click.IntRange(min=2))
@click.pass_context
def before_first_day(ctx, row):
    """Draft the before-first-day email for personnel sheet ROW."""
    controller = ctx.obj['controller']

    result = controller.workflow(BeforeFirstDayWorkflow).execute(row)
    display_workflow_results(result)
    ctx.exit(0 if result.success else 1)


@cli.command('audit-trail')
@click.option('--employee', help='Filter by employee ("Last, First")')
@click.option('--workflow-id', help='Filter by workflow run')
@click.option('--limit', default=50, help='Maximum number of records to show')
@click.pass_context
def audit_trail(ctx, employee, workflow_id, limit):
    """Show recent audit records."""
    controller = ctx.obj['controller']

    audit_records = controller.audit_logger.get_events(workflow_id=workflow_id, employee=employee, limit=limit)
    if not audit_records:
        console.print("[yellow]No audit records found[/yellow]")
        return

    table = Table(title=f"Audit Trail ({len(audit_records)})")
    table.add_column("Timestamp", style="cyan")
    table.add_column("Workflow", style="green")
    table.add_column("Employee", style="blue")
    table.add_column("System", style="yellow")
    table.add_column("Action", style="magenta")
    table.add_column("Resource")
    table.add_column("Success", style="red")

    for record in audit_records:
        table.add_row(
            record.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            record.workflow_type,
            record.employee,
            record.system,
            record.action,
            record.resource,
            "✓" if record.success else "✗"
        )

    console.print(table)


@cli.command()
@click.option('--port', default=8000, help='Port to run the API server on')
@click.option('--host', default='127.0.0.1', help='Host to bind the API server to')
@click.pass_context
def serve(ctx, port, host):
    """Start the HR Lifecycle Engine API server."""
    from ..api import server

    server.configure(ctx.obj['controller'].settings)

    console.print(f"[green]Starting HR Lifecycle Engine API server on {host}:{port}[/green]")
    console.print("[blue]Press Ctrl+C to stop[/blue]")

    try:
        server.start_server(host=host, port=port, reload=False)
    except KeyboardInterrupt:
        console.print("[yellow]Server stopped[/yellow]")


def display_workflow_results(result: WorkflowResult):
    """Display workflow execution results."""
    if result.success:
        console.print("[green]✓ Workflow completed successfully[/green]")
    else:
        console.print(f"[red]✗ Workflow failed with {len(result.errors)} errors[/red]")

    table = Table(title="Workflow Execution Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("Workflow ID", result.workflow_id)
    table.add_row("Workflow", result.workflow_type.value)
    table.add_row("Employee", result.employee or "N/A")
    table.add_row("Started", result.started_at.strftime("%Y-%m-%d %H:%M:%S") if result.started_at else "N/A")
    table.add_row("Completed", result.completed_at.strftime("%Y-%m-%d %H:%M:%S") if result.completed_at else "N/A")
    table.add_row("Total Steps", str(len(result.actions_taken)))
    table.add_row("Successful", str(sum(1 for a in result.actions_taken if a.get('success', False))))
    table.add_row("Failed", str(sum(1 for a in result.actions_taken if not a.get('success', False))))

    console.print(table)

    if result.errors:
        console.print("[red]Errors:[/red]")
        for error in result.errors:
            console.print(f"  - {error}")


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
