"""
Base class for pipeline steps.

A step reads its named inputs, transforms them into named outputs and
writes the outputs. The runner calls the three phases separately so it can
report each one.
"""

from abc import ABC, abstractmethod
from pathlib import Path

import polars as pl
from rich.console import Console
from rich.table import Table

from drug_index.config import Settings, settings
from drug_index.io import read_inputs, write_dataset

console = Console()


class BaseStep(ABC):
    """Base class for pipeline steps (inputs → outputs)."""

    step_key: str
    name: str
    inputs: tuple[str, ...] = ()
    optional_inputs: tuple[str, ...] = ()

    def __init__(self, config: Settings = settings):
        self.config = config
        self.frames: dict[str, pl.DataFrame] = {}
        self.results: dict[str, pl.DataFrame] = {}

    def read(self) -> dict[str, pl.DataFrame]:
        """
        Read every input named in ``inputs`` from the configured resources.

        Entries of ``optional_inputs`` are read only when configured.

        Returns:
            Dict mapping input names to frames
        """
        console.print(f"  Loading raw inputs for {self.name}...")
        resources = {key: getattr(self.config.inputs, key) for key in self.inputs}
        for key in self.optional_inputs:
            resource = getattr(self.config.inputs, key)
            if resource is not None:
                resources[key] = resource
        self.frames = read_inputs(resources, self.config)
        return self.frames

    @abstractmethod
    def transform(self) -> dict[str, pl.DataFrame]:
        """
        Build outputs from ``self.frames``.

        Returns:
            Dict mapping output dataset names to frames
        """
        pass

    def write(self) -> dict[str, Path]:
        """
        Write every output produced by ``transform``.

        Returns:
            Dict mapping output dataset names to file paths
        """
        console.print(f"  Writing outputs: {', '.join(self.results)}")
        paths = {name: write_dataset(df, name, self.config) for name, df in self.results.items()}

        table = Table(title=f"{self.name} Summary", show_header=True)
        table.add_column("Output", style="cyan")
        table.add_column("Rows", justify="right")
        table.add_column("File", style="dim")
        for name, path in paths.items():
            table.add_row(name, f"{len(self.results[name]):,}", path.name)
        console.print(table)

        return paths

    def run(self) -> dict[str, Path]:
        """Run read, transform and write in order."""
        console.print(f"[bold cyan]{self.name}[/]")
        self.read()
        self.transform()
        return self.write()

    def row_count(self) -> int:
        """Total rows across outputs."""
        return sum(len(df) for df in self.results.values())

    def _print_frames(self, frames: dict[str, pl.DataFrame]) -> None:
        """Print columns and row counts of intermediate frames (DEBUG only)."""
        if not self.config.debug:
            return
        table = Table(title="Intermediate frames", show_header=True)
        table.add_column("Frame", style="cyan")
        table.add_column("Rows", justify="right")
        table.add_column("Columns", style="dim")
        for name, df in frames.items():
            table.add_row(name, f"{len(df):,}", ", ".join(df.columns))
        console.print(table)
