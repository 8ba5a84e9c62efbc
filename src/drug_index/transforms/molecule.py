"""
ChEMBL molecules.

Renames raw molecule fields and adds synonyms, trade names, cross
references (including DrugBank) and child molecules. Optional drug
extensions supply extra synonyms and cross references by molecule id.
"""

import polars as pl
from rich.console import Console

from drug_index.transforms.common import conform_nested

console = Console()

MOLECULE_DTYPES = {
    "pref_name": pl.String,
    "molecule_type": pl.String,
    "molecule_structures": pl.Struct({"canonical_smiles": pl.String, "standard_inchi_key": pl.String}),
    "molecule_hierarchy": pl.Struct({"molecule_chembl_id": pl.String, "parent_chembl_id": pl.String}),
    "cross_references": pl.List(pl.Struct({"xref_id": pl.String, "xref_src": pl.String})),
    "molecule_synonyms": pl.List(pl.Struct({"molecule_synonym": pl.String, "syn_type": pl.String})),
}

EXTENSION_DTYPES = {
    "synonyms": pl.List(pl.String),
    "crossReferences": pl.List(pl.Struct({"source": pl.String, "ids": pl.List(pl.String)})),
}


def drugbank_lookup(drugbank_raw: pl.DataFrame) -> pl.DataFrame:
    """Rename the UniChem DrugBank to ChEMBL mapping columns to ``id`` and ``drugbank_id``."""
    return drugbank_raw.select(
        pl.col("From src:'1'").alias("id"),
        pl.col("To src:'2'").alias("drugbank_id"),
    )


def _preprocess(molecule_raw: pl.DataFrame) -> pl.DataFrame:
    return conform_nested(molecule_raw, MOLECULE_DTYPES).select(
        pl.col("molecule_chembl_id").alias("id"),
        pl.col("pref_name").alias("name"),
        pl.col("molecule_type").fill_null("Unknown").alias("drugType"),
        pl.col("molecule_structures").struct.field("canonical_smiles").alias("canonicalSmiles"),
        pl.col("molecule_structures").struct.field("standard_inchi_key").alias("inchiKey"),
        pl.col("molecule_hierarchy").struct.field("parent_chembl_id").alias("parentId"),
        pl.col("max_phase").cast(pl.Float64, strict=False).alias("maximumClinicalTrialPhase"),
        pl.col("first_approval").cast(pl.Int64, strict=False).alias("yearOfFirstApproval"),
        pl.col("withdrawn_flag").cast(pl.Boolean, strict=False).fill_null(False).alias("hasBeenWithdrawn"),
        pl.col("black_box_warning").cast(pl.Int64, strict=False).eq(1).fill_null(False).alias("blackBoxWarning"),
        "cross_references",
        "molecule_synonyms",
    ).with_columns(
        # parent references to itself are dropped
        pl.when(pl.col("parentId") == pl.col("id"))
        .then(pl.lit(None, dtype=pl.String))
        .otherwise(pl.col("parentId"))
        .alias("parentId")
    )


def _synonyms(mols: pl.DataFrame, extensions: pl.DataFrame | None = None) -> pl.DataFrame:
    """Sorted unique trade names and other synonyms per molecule."""
    syns = (
        mols.select("id", pl.col("molecule_synonyms").alias("syn"))
        .explode("syn")
        .filter(pl.col("syn").is_not_null())
        .select(
            "id",
            pl.col("syn").struct.field("molecule_synonym").alias("synonym"),
            pl.col("syn").struct.field("syn_type").str.to_uppercase().alias("syn_type"),
        )
    )

    if extensions is not None:
        extra = (
            extensions.select("id", pl.col("synonyms").alias("synonym"))
            .explode("synonym")
            .filter(pl.col("synonym").is_not_null())
            .select("id", pl.col("synonym").cast(pl.String), pl.lit("EXTENSION").alias("syn_type"))
        )
        syns = pl.concat([syns, extra])

    trade_names = (
        syns.filter(pl.col("syn_type") == "TRADE_NAME")
        .group_by("id")
        .agg(pl.col("synonym").unique().sort().alias("tradeNames"))
    )
    other = (
        syns.filter(pl.col("syn_type") != "TRADE_NAME")
        .group_by("id")
        .agg(pl.col("synonym").unique().sort().alias("synonyms"))
    )
    return trade_names.join(other, on="id", how="full", coalesce=True)


def _cross_references(
    mols: pl.DataFrame,
    drugbank: pl.DataFrame,
    extensions: pl.DataFrame | None = None,
) -> pl.DataFrame:
    """ChEMBL, DrugBank and extension cross references as a list of ``{source, ids}``."""
    chembl = (
        mols.select("id", pl.col("cross_references").alias("xref"))
        .explode("xref")
        .filter(pl.col("xref").is_not_null())
        .select(
            "id",
            pl.col("xref").struct.field("xref_src").alias("source"),
            pl.col("xref").struct.field("xref_id").cast(pl.String).alias("ref_id"),
        )
    )

    drugbank_refs = drugbank.filter(pl.col("drugbank_id").is_not_null()).select(
        "id",
        pl.lit("drugbank").alias("source"),
        pl.col("drugbank_id").cast(pl.String).alias("ref_id"),
    )

    parts = [chembl, drugbank_refs]
    if extensions is not None:
        parts.append(
            extensions.select("id", pl.col("crossReferences").alias("xref"))
            .explode("xref")
            .filter(pl.col("xref").is_not_null())
            .select(
                "id",
                pl.col("xref").struct.field("source").cast(pl.String),
                pl.col("xref").struct.field("ids").alias("ref_id"),
            )
            .explode("ref_id")
            .filter(pl.col("ref_id").is_not_null())
            .with_columns(pl.col("ref_id").cast(pl.String))
        )

    return (
        pl.concat(parts)
        .group_by(["id", "source"])
        .agg(pl.col("ref_id").unique().sort().alias("ids"))
        .group_by("id")
        .agg(pl.struct("source", "ids").alias("crossReferences"))
    )


def _children(mols: pl.DataFrame) -> pl.DataFrame:
    """Child molecule ids grouped under their parent."""
    return (
        mols.select("id", "parentId")
        .filter(pl.col("parentId").is_not_null())
        .group_by("parentId")
        .agg(pl.col("id").unique().sort().alias("childChemblIds"))
        .rename({"parentId": "id"})
    )


def process_molecules(
    molecule_raw: pl.DataFrame,
    drugbank_raw: pl.DataFrame,
    extensions_raw: pl.DataFrame | None = None,
) -> pl.DataFrame:
    """
    Process raw ChEMBL molecules.

    Args:
        molecule_raw: ChEMBL molecule records
        drugbank_raw: DrugBank to ChEMBL mapping with ``From src:'1'`` and ``To src:'2'``
        extensions_raw: Optional drug extensions keyed by ``id``, each with
            ``synonyms`` and/or ``crossReferences`` (``[{source, ids}]``).
            Extension synonyms join ``synonyms``; extension cross references
            merge with ChEMBL ones of the same source. Ids that are not
            ChEMBL molecules are ignored.

    Returns:
        One row per molecule id. Molecules without synonyms, cross references
        or children keep nulls in those columns.
    """
    console.print("  Processing molecules...")
    mols = _preprocess(molecule_raw)
    extensions = None if extensions_raw is None else conform_nested(extensions_raw, EXTENSION_DTYPES)

    df = (
        mols.drop(["cross_references", "molecule_synonyms"])
        .join(_synonyms(mols, extensions), on="id", how="left")
        .join(_cross_references(mols, drugbank_lookup(drugbank_raw), extensions), on="id", how="left")
        .join(_children(mols), on="id", how="left")
        .with_columns(pl.coalesce(pl.col("name"), pl.col("synonyms").list.first(), pl.col("id")).alias("name"))
        .unique(subset=["id"], keep="first", maintain_order=True)
    )
    console.print(f"    [green]✓[/] molecules: {len(df):,} rows")
    return df
