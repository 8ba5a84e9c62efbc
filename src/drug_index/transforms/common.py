"""
Column helpers shared by the drug and target transforms.
"""

import polars as pl

REFERENCE = pl.Struct({"ref_id": pl.String, "ref_type": pl.String, "ref_url": pl.String})


def normalize_efo_ids(df: pl.DataFrame, column: str = "efo_id") -> pl.DataFrame:
    """Rewrite ``PREFIX:NUMBER`` ids to ``PREFIX_NUMBER``. Ids without a colon are untouched."""
    return df.with_columns(pl.col(column).str.replace_all(":", "_", literal=True))


def strip_id_from_uri(column: str | pl.Expr) -> pl.Expr:
    """Keep the last path segment of a URI, e.g. ``http://www.ebi.ac.uk/efo/EFO_0000001`` -> ``EFO_0000001``."""
    expr = pl.col(column) if isinstance(column, str) else column
    return expr.str.split("/").list.last()


def split_packed_ids(df: pl.DataFrame, column: str, separator: str = ",") -> pl.DataFrame:
    """
    Split a separator-packed id column into one row per id.

    ClinicalTrials references pack several NCT ids into a single ``ref_id``;
    every id produced keeps the rest of its row (type, url, ...).
    """
    return (
        df.with_columns(pl.col(column).str.split(separator))
        .explode(column)
        .with_columns(pl.col(column).str.strip_chars())
    )


def nest(df: pl.DataFrame, columns: list[str], name: str) -> pl.DataFrame:
    """Move ``columns`` into a single struct column ``name``."""
    return df.with_columns(pl.struct(columns).alias(name)).drop(columns)


def reference_bundles(
    df: pl.DataFrame,
    keys: list[str],
    phase_column: str | None = None,
) -> pl.DataFrame:
    """
    Group exploded reference rows into one bundle per reference type.

    Expects ``ref_type``, ``ref_id`` and ``ref_url`` columns. Returns one row per
    ``keys + [ref_type]`` with a ``references`` struct of ``source``, ``ids`` and
    ``urls``; ids and urls stay positionally aligned. When ``phase_column`` is
    given its maximum is carried along.
    """
    aggs = [
        pl.col("ref_id").alias("ids"),
        pl.col("ref_url").alias("urls"),
    ]
    if phase_column:
        aggs.insert(0, pl.col(phase_column).max())

    return (
        df.group_by([*keys, "ref_type"])
        .agg(aggs)
        .with_columns(
            pl.struct(
                pl.col("ref_type").alias("source"),
                pl.col("ids"),
                pl.col("urls"),
            ).alias("references")
        )
        .drop(["ref_type", "ids", "urls"])
    )


def conform_nested(df: pl.DataFrame, dtypes: dict[str, pl.DataType]) -> pl.DataFrame:
    """
    Give nested columns a usable type.

    JSON lines where a field is always null or an empty list come back as
    ``Null`` or ``List(Null)``, which has no struct fields to read; such
    columns are cast to ``dtypes``. Absent columns are added as nulls.
    Columns with an inferred type are left as they are.
    """
    casts = []
    for name, dtype in dtypes.items():
        if name not in df.columns:
            casts.append(pl.lit(None, dtype=dtype).alias(name))
        elif df.schema[name] in (pl.Null, pl.List(pl.Null)):
            casts.append(pl.col(name).cast(dtype))
    if not casts:
        return df
    return df.with_columns(casts)
