"""
Reading and writing named tabular datasets.

Parquet inputs may be a single file or a directory of part files, the way
Open Targets releases are distributed.
"""

from pathlib import Path

import polars as pl
from rich.console import Console

from drug_index.config import InputResource, Settings, settings

console = Console()


def read_dataset(resource: InputResource, config: Settings = settings) -> pl.DataFrame:
    """
    Read one input dataset.

    Args:
        resource: Location and format of the dataset
        config: Settings used to resolve relative paths

    Returns:
        The dataset as an eager DataFrame

    Raises:
        FileNotFoundError: If the resolved path does not exist
        ValueError: If the format is not supported
    """
    path = config.input_path(resource)
    if not path.exists():
        raise FileNotFoundError(f"Input not found: {path}")

    if resource.format == "parquet":
        if path.is_dir():
            parquet_files = list(path.glob("*.parquet"))
            if not parquet_files:
                raise FileNotFoundError(f"No parquet files in {path}")
            return pl.scan_parquet(path / "*.parquet").collect()
        return pl.read_parquet(path)

    if resource.format == "json":
        if path.is_dir():
            return pl.concat(
                [pl.read_ndjson(p) for p in sorted(path.glob("*.json*"))],
                how="diagonal_relaxed",
            )
        return pl.read_ndjson(path)

    if resource.format == "csv":
        df = pl.read_csv(
            path,
            separator=resource.separator,
            has_header=resource.has_header,
            infer_schema=False,
            quote_char=None,
        )
        if resource.columns:
            df = df.rename(dict(zip(df.columns, resource.columns)))
        return df

    raise ValueError(f"Unsupported input format: {resource.format}")


def read_inputs(resources: dict[str, InputResource], config: Settings = settings) -> dict[str, pl.DataFrame]:
    """Read several named datasets, printing a row count for each."""
    frames = {}
    for name, resource in resources.items():
        df = read_dataset(resource, config)
        console.print(f"    [green]✓[/] {name}: {len(df):,} rows")
        frames[name] = df
    return frames


def write_dataset(df: pl.DataFrame, name: str, config: Settings = settings) -> Path:
    """
    Write a named output dataset.

    Args:
        df: Frame to write
        name: Output dataset name, e.g. ``drugs-beta``
        config: Settings providing the output directory and format

    Returns:
        Path of the written file
    """
    dest = config.output_path(name)
    dest.parent.mkdir(parents=True, exist_ok=True)

    if config.output_format == "parquet":
        df.write_parquet(dest)
    elif config.output_format == "json":
        df.write_ndjson(dest)
    else:
        raise ValueError(f"Unsupported output format: {config.output_format}")

    console.print(f"    [green]✓[/] {name}: {len(df):,} rows → {dest.name}")
    return dest
