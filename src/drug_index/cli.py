"""
Command-line interface for drug_index.

Commands:
- etl: Run the pipeline with a live status dashboard
- drug: Build the drugs-beta dataset
- ortholog: Build the orthologs dataset
- config: Show the effective configuration
"""

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="drug-index",
    help="Drug and ortholog index ETL CLI",
    no_args_is_help=True,
)
console = Console()


def _run(step: str | None, interactive: bool = False, live: bool = True) -> None:
    from drug_index.etl.runner import ETLRunner

    runner = ETLRunner()

    if interactive and not step:
        runner.run_interactive()
        return

    ok = runner.run_step(step, live_display=live) if step else runner.run_all(live_display=live)
    if not ok:
        raise typer.Exit(code=1)


@app.command()
def etl(
    interactive: bool = typer.Option(
        True, "--interactive/--batch", "-i/-b",
        help="Interactive mode with live dashboard"
    ),
    step: str | None = typer.Option(
        None, "--step", "-s", help="Run a specific step only (drug, ortholog)"
    ),
):
    """Run the ETL pipeline with live status dashboard."""
    _run(step, interactive=interactive)


@app.command()
def drug(
    live: bool = typer.Option(True, "--live/--plain", help="Show the live dashboard"),
):
    """Build the drugs-beta dataset."""
    _run("drug", live=live)


@app.command()
def ortholog(
    live: bool = typer.Option(True, "--live/--plain", help="Show the live dashboard"),
):
    """Build the orthologs dataset."""
    _run("ortholog", live=live)


@app.command()
def config():
    """Show the effective configuration."""
    from drug_index.config import settings

    table = Table(title="Inputs", show_header=True)
    table.add_column("Input", style="cyan")
    table.add_column("Format")
    table.add_column("Path", style="dim")
    for name, resource in settings.inputs:
        if resource is None:
            table.add_row(name, "-", "[dim]not configured[/]")
            continue
        table.add_row(name, resource.format, str(settings.input_path(resource)))
    console.print(table)

    console.print(f"[bold]Output:[/] {settings.output_dir} ({settings.output_format})")
    console.print(f"[bold]Target species:[/] {', '.join(settings.target_species)}")
    console.print(f"[bold]Strict identity cast:[/] {settings.strict_identity_cast}")
    console.print(f"[bold]Split packed reference ids:[/] {settings.split_packed_reference_ids}")


if __name__ == "__main__":
    app()
