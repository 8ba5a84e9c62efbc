"""
Targets and diseases linked to each drug through ChEMBL evidence.
"""

import polars as pl
from rich.console import Console

from drug_index.transforms.common import strip_id_from_uri

console = Console()


def linked_targets_and_diseases(evidence_raw: pl.DataFrame) -> pl.DataFrame:
    """
    Distinct target and disease ids per drug.

    Only ChEMBL evidence is used when the frame carries a ``sourceId``
    column. Drug ids given as URIs are reduced to their last segment.

    Returns:
        DataFrame of ``id``, ``linkedTargets`` and ``linkedDiseases``, each a
        struct of ``rows`` and ``count``
    """
    df = evidence_raw
    if "sourceId" in df.columns:
        df = df.filter(pl.col("sourceId") == "chembl")

    df = (
        df.select(strip_id_from_uri("drugId").alias("id"), "targetId", "diseaseId")
        .filter(pl.col("id").is_not_null())
        .group_by("id")
        .agg(
            pl.col("targetId").drop_nulls().unique().sort().alias("targets"),
            pl.col("diseaseId").drop_nulls().unique().sort().alias("diseases"),
        )
        .select(
            "id",
            pl.struct(
                pl.col("targets").alias("rows"),
                pl.col("targets").list.len().alias("count"),
            ).alias("linkedTargets"),
            pl.struct(
                pl.col("diseases").alias("rows"),
                pl.col("diseases").list.len().alias("count"),
            ).alias("linkedDiseases"),
        )
    )
    console.print(f"    [green]✓[/] target and disease linkages: {len(df):,} drugs")
    return df
