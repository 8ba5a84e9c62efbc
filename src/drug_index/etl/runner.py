"""
Interactive ETL Pipeline Runner.

Provides a live dashboard showing:
- All pipeline steps with status per phase (pending, running, done, failed)
- Phase durations and output row counts
- Selective execution of a single step

Usage:
    from drug_index.etl.runner import ETLRunner
    runner = ETLRunner()
    runner.run_interactive()   # Full interactive menu
    runner.run_all()           # Run everything
    runner.run_step("drug")    # Run one step
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.text import Text

from drug_index.config import Settings, settings
from drug_index.steps import STEPS, BaseStep

PHASES = ["read", "transform", "write"]


class StepStatus(Enum):
    """Status of a pipeline phase."""

    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class PhaseRun:
    """A single phase (read, transform or write) of one step."""

    step: str
    phase: str
    status: StepStatus = StepStatus.PENDING
    error: str | None = None
    duration: float | None = None


class ETLRunner:
    """Interactive pipeline runner with live status display."""

    def __init__(self, config: Settings = settings, console: Console | None = None):
        self.config = config
        self.console = console or Console()
        self.runs: dict[str, dict[str, PhaseRun]] = {}  # step -> phase -> run
        self.row_counts: dict[str, int] = {}
        self._init_runs()

    def _init_runs(self) -> None:
        """Reset every phase to pending."""
        self.runs = {key: {phase: PhaseRun(key, phase) for phase in PHASES} for key in STEPS}
        self.row_counts = {}

    def _get_status_icon(self, status: StepStatus) -> str:
        """Get icon for phase status."""
        return {
            StepStatus.PENDING: "[dim][ ][/]",
            StepStatus.RUNNING: "[yellow][>][/]",
            StepStatus.DONE: "[green][ok][/]",
            StepStatus.FAILED: "[red][!][/]",
            StepStatus.SKIPPED: "[dim][-][/]",
        }[status]

    def _build_dashboard(self, current_step: str | None = None) -> Panel:
        """Build the live dashboard display."""
        table = Table(
            title="Pipeline Status",
            show_header=True,
            header_style="bold cyan",
            expand=True,
        )
        table.add_column("Step", width=20)
        for phase in PHASES:
            table.add_column(phase.title(), width=12, justify="center")
        table.add_column("Rows", justify="right", width=12)

        for key, step_cls in STEPS.items():
            name_style = "bold yellow" if key == current_step else ""

            cells = []
            for phase in PHASES:
                run = self.runs[key][phase]
                icon = self._get_status_icon(run.status)
                cells.append(f"{icon} {run.duration:.1f}s" if run.duration is not None else icon)

            rows = f"{self.row_counts[key]:,}" if key in self.row_counts else "-"
            table.add_row(Text(step_cls.name, style=name_style), *cells, rows)

        legend = Text()
        legend.append("Legend: ", style="bold")
        legend.append("[ ] pending  ", style="dim")
        legend.append("[>] running  ", style="yellow")
        legend.append("[ok] done  ", style="green")
        legend.append("[!] failed  ", style="red")
        legend.append("[-] skipped", style="dim")

        content = Group(table, Text(""), legend)
        return Panel(content, title="[bold blue]Drug Index ETL[/]", border_style="blue")

    def _run_phase(self, step: BaseStep, phase: str, live: Live | None = None) -> bool:
        """
        Run a single phase of a step.

        Returns True if successful, False otherwise.
        """
        run = self.runs[step.step_key][phase]
        run.status = StepStatus.RUNNING
        if live:
            live.update(self._build_dashboard(step.step_key))

        start_time = time.time()
        try:
            getattr(step, phase)()
            if phase == "transform":
                self.row_counts[step.step_key] = step.row_count()
            run.status = StepStatus.DONE
            return True

        except Exception as e:
            run.status = StepStatus.FAILED
            run.error = str(e)
            self.console.print(f"[red]Error in {step.step_key}/{phase}: {e}[/]")
            return False

        finally:
            run.duration = time.time() - start_time
            if live:
                live.update(self._build_dashboard(step.step_key))

    def _skip_remaining(self, step_key: str) -> None:
        for run in self.runs[step_key].values():
            if run.status == StepStatus.PENDING:
                run.status = StepStatus.SKIPPED

    def _run_steps(self, keys: list[str], live: Live | None) -> bool:
        for key in keys:
            step = STEPS[key](self.config)
            self.console.print(f"[bold cyan]{step.name}[/]")
            for phase in PHASES:
                if not self._run_phase(step, phase, live):
                    self._skip_remaining(key)
                    self.console.print(f"[red]Pipeline stopped: error in {key}/{phase}[/]")
                    return False
        return True

    def run_step(self, step_key: str, live_display: bool = True) -> bool:
        """
        Run one pipeline step.

        Args:
            step_key: Step to run (see ``drug_index.steps.STEPS``)
            live_display: Show the live dashboard while running

        Returns:
            True if all phases succeeded
        """
        if step_key not in STEPS:
            self.console.print(f"[red]Unknown step: {step_key}[/]")
            return False
        return self._run([step_key], live_display)

    def run_all(self, live_display: bool = True) -> bool:
        """Run the complete pipeline."""
        return self._run(list(STEPS), live_display)

    def _run(self, keys: list[str], live_display: bool) -> bool:
        if not live_display:
            return self._run_steps(keys, None)
        with Live(self._build_dashboard(), console=self.console, refresh_per_second=4) as live:
            return self._run_steps(keys, live)

    def run_interactive(self) -> None:
        """Run interactive menu for pipeline execution."""
        while True:
            self.console.clear()
            self.console.print(self._build_dashboard())
            self.console.print()

            self.console.print("[bold]Options:[/]")
            self.console.print("  [cyan]1[/] - Run complete pipeline")
            self.console.print("  [cyan]2[/] - Run specific step")
            self.console.print("  [cyan]3[/] - Reset status")
            self.console.print("  [cyan]q[/] - Quit")
            self.console.print()

            choice = Prompt.ask("Select option", choices=["1", "2", "3", "q"], default="q")

            if choice == "q":
                break

            elif choice == "1":
                self.run_all()
                Prompt.ask("Press Enter to continue")

            elif choice == "2":
                keys = list(STEPS)
                self.console.print("\n[bold]Available steps:[/]")
                for i, key in enumerate(keys, 1):
                    self.console.print(f"  [cyan]{i:2}[/] - {STEPS[key].name}")

                idx = Prompt.ask("\nStep number", default="1")
                try:
                    self.run_step(keys[int(idx) - 1])
                except (ValueError, IndexError):
                    self.console.print("[red]Invalid selection[/]")
                Prompt.ask("Press Enter to continue")

            elif choice == "3":
                if Confirm.ask("Reset all step status?", default=True):
                    self._init_runs()
                    self.console.print("[green]Status reset[/]")
                Prompt.ask("Press Enter to continue")

    def show_status(self) -> None:
        """Display current pipeline status."""
        self.console.print(self._build_dashboard())


def main():
    """Entry point for CLI."""
    runner = ETLRunner()
    runner.run_interactive()


if __name__ == "__main__":
    main()
