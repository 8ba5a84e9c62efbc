"""
ChEMBL mechanisms of action for incorporation into drugs.

Output schema:
    id
    mechanismsOfAction
    -- rows
    ---- mechanismOfAction
    ---- actionType
    ---- targetName
    ---- targetType
    ---- targets
    ---- references
    -- uniqueActionTypes
    -- uniqueTargetTypes
"""

import polars as pl
from rich.console import Console

from drug_index.transforms.common import REFERENCE, conform_nested, nest, reference_bundles

console = Console()


def chembl_target_genes(target_raw: pl.DataFrame, gene_raw: pl.DataFrame) -> pl.DataFrame:
    """
    Resolve ChEMBL targets to Ensembl gene ids.

    Target components carry UniProt accessions; a gene matches when one of
    its ``proteinIds`` has the same id.

    Args:
        target_raw: ChEMBL targets with ``target_chembl_id``, ``pref_name``,
            ``target_type`` and ``target_components``
        gene_raw: Target (gene) dataset with ``id`` and ``proteinIds``

    Returns:
        DataFrame of ``target_chembl_id``, ``targetName``, ``targetType``, ``targets``
    """
    accessions = (
        conform_nested(target_raw, {"target_components": pl.List(pl.Struct({"accession": pl.String}))})
        .select("target_chembl_id", pl.col("target_components").alias("component"))
        .explode("component")
        .filter(pl.col("component").is_not_null())
        .select("target_chembl_id", pl.col("component").struct.field("accession"))
    )

    proteins = (
        gene_raw.select(pl.col("id").alias("gene_id"), pl.col("proteinIds").alias("protein"))
        .explode("protein")
        .filter(pl.col("protein").is_not_null())
        .select("gene_id", pl.col("protein").struct.field("id").alias("accession"))
        .unique()
    )

    genes = (
        accessions.join(proteins, on="accession", how="inner")
        .group_by("target_chembl_id")
        .agg(pl.col("gene_id").unique().sort().alias("targets"))
    )

    return (
        target_raw.select(
            "target_chembl_id",
            pl.col("pref_name").alias("targetName"),
            pl.col("target_type").alias("targetType"),
        )
        .unique(subset=["target_chembl_id"])
        .join(genes, on="target_chembl_id", how="left")
    )


def process_mechanisms(
    mechanism_raw: pl.DataFrame,
    target_raw: pl.DataFrame,
    gene_raw: pl.DataFrame,
) -> pl.DataFrame:
    """
    Build one ``mechanismsOfAction`` set per drug.

    Each raw mechanism becomes one row; its references are bundled per
    reference type like indication references.

    Returns:
        DataFrame of ``id`` and ``mechanismsOfAction``
    """
    console.print("  Processing mechanisms of action...")
    mechanisms = conform_nested(
        mechanism_raw,
        {"target_chembl_id": pl.String, "mechanism_refs": pl.List(REFERENCE)},
    ).select(
        pl.col("molecule_chembl_id").alias("id"),
        pl.col("mechanism_of_action").alias("mechanismOfAction"),
        pl.col("action_type").alias("actionType"),
        "target_chembl_id",
        "mechanism_refs",
    ).with_row_index("mechanism_idx")

    refs = (
        mechanisms.select("mechanism_idx", pl.col("mechanism_refs").alias("r"))
        .explode("r")
        .filter(pl.col("r").is_not_null())
        .select(
            "mechanism_idx",
            pl.col("r").struct.field("ref_id"),
            pl.col("r").struct.field("ref_type"),
            pl.col("r").struct.field("ref_url"),
        )
    )
    bundles = reference_bundles(refs, ["mechanism_idx"]).group_by("mechanism_idx").agg(pl.col("references"))

    df = (
        mechanisms.drop("mechanism_refs")
        .join(bundles, on="mechanism_idx", how="left")
        .join(chembl_target_genes(target_raw, gene_raw), on="target_chembl_id", how="left")
        .with_columns(
            pl.struct(
                "mechanismOfAction",
                "actionType",
                "targetName",
                "targetType",
                "targets",
                "references",
            ).alias("mechanism")
        )
        .group_by("id")
        .agg(
            pl.col("mechanism").alias("rows"),
            pl.col("actionType").drop_nulls().unique().sort().alias("uniqueActionTypes"),
            pl.col("targetType").drop_nulls().unique().sort().alias("uniqueTargetTypes"),
        )
    )
    df = nest(df, ["rows", "uniqueActionTypes", "uniqueTargetTypes"], "mechanismsOfAction")
    console.print(f"    [green]✓[/] mechanisms of action: {len(df):,} drugs")
    return df
