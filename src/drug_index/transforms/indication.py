"""
ChEMBL indications for incorporation into drugs.

Output schema:
    id
    indications
    -- rows
    ---- disease
    ---- maxPhaseForIndication
    ---- references
    ------ source
    ------ ids
    ------ urls
    -- count
    indicationTherapeuticAreas
    -- therapeuticCode
    -- therapeuticLabel
    -- count
"""

import polars as pl
from rich.console import Console

from drug_index.transforms.common import (
    REFERENCE,
    conform_nested,
    nest,
    normalize_efo_ids,
    reference_bundles,
    split_packed_ids,
    strip_id_from_uri,
)

console = Console()


def aggregate_references(indications_raw: pl.DataFrame, split_packed: bool = True) -> pl.DataFrame:
    """
    Collapse raw indication rows into one row per drug and disease.

    Indications without a disease id cannot be linked and are dropped.

    Args:
        indications_raw: ChEMBL indications with ``molecule_chembl_id``, ``efo_id``,
            ``max_phase_for_ind`` and ``indication_refs``
        split_packed: Split comma-packed ``ref_id`` values into separate ids

    Returns:
        DataFrame of ``id``, ``efo_id``, ``max_phase_for_indications`` and
        ``references`` (one bundle per reference type)
    """
    df = (
        conform_nested(indications_raw, {"efo_id": pl.String, "indication_refs": pl.List(REFERENCE)})
        .pipe(normalize_efo_ids)
        .select(
            pl.col("molecule_chembl_id").alias("id"),
            pl.col("efo_id"),
            pl.col("max_phase_for_ind").cast(pl.Float64, strict=False),
            pl.col("indication_refs").alias("r"),
        )
        .explode("r")
        .filter(pl.col("r").is_not_null())
        .filter(pl.col("efo_id").is_not_null())
        .select(
            "id",
            "efo_id",
            "max_phase_for_ind",
            pl.col("r").struct.field("ref_id"),
            pl.col("r").struct.field("ref_type"),
            pl.col("r").struct.field("ref_url"),
        )
    )

    if split_packed:
        df = split_packed_ids(df, "ref_id")

    return (
        reference_bundles(df, ["id", "efo_id"], phase_column="max_phase_for_ind")
        .group_by(["id", "efo_id"])
        .agg(
            pl.col("max_phase_for_ind").max().alias("max_phase_for_indications"),
            pl.col("references"),
        )
    )


def efo_lookup(disease_raw: pl.DataFrame) -> pl.DataFrame:
    """
    Disease metadata keyed by normalized EFO id.

    Ids are normalized like indication ids, so ``MONDO:0000002`` and
    ``http://.../MONDO_0000002`` both key as ``MONDO_0000002``.

    Returns:
        DataFrame of ``efo_id``, ``efo_url``, ``efo_label``, ``therapeutic_codes``
        and ``therapeutic_labels``
    """
    uri_column = "code" if "code" in disease_raw.columns else "id"
    return (
        disease_raw.select(
            strip_id_from_uri(uri_column).alias("efo_id"),
            pl.col(uri_column).alias("efo_url"),
            pl.col("label").alias("efo_label"),
            pl.col("therapeutic_codes"),
            pl.col("therapeutic_labels"),
        )
        .pipe(normalize_efo_ids)
        .unique(subset=["efo_id"])
    )


def nest_indications(indications: pl.DataFrame) -> pl.DataFrame:
    """Roll per drug-disease rows into one ``indications`` struct per drug."""
    df = (
        indications.with_columns(
            pl.struct(
                pl.col("efo_id").alias("disease"),
                pl.col("max_phase_for_indications").alias("maxPhaseForIndication"),
                pl.col("references"),
            ).alias("indication")
        )
        .group_by("id")
        .agg(pl.col("indication").alias("rows"))
        .with_columns(pl.col("rows").list.len().alias("count"))
    )
    return nest(df, ["rows", "count"], "indications")


def therapeutic_areas(indications: pl.DataFrame) -> pl.DataFrame:
    """
    Count the indication diseases of each drug per therapeutic area.

    Drugs whose diseases carry no therapeutic areas produce no row. Codes and
    labels pair up by position; a code without a label keeps a null label.
    """
    return (
        indications.select("id", "efo_id", "therapeutic_codes", "therapeutic_labels")
        .filter(pl.col("therapeutic_codes").is_not_null())
        .with_columns(pl.int_ranges(0, pl.col("therapeutic_codes").list.len()).alias("area_idx"))
        .explode(["therapeutic_codes", "area_idx"])
        .filter(pl.col("therapeutic_codes").is_not_null())
        .with_columns(
            pl.col("therapeutic_labels").list.get(pl.col("area_idx"), null_on_oob=True)
        )
        .group_by(["id", "therapeutic_codes", "therapeutic_labels"])
        .agg(pl.col("efo_id").n_unique().alias("count"))
        .select(
            "id",
            pl.struct(
                pl.col("therapeutic_codes").alias("therapeuticCode"),
                pl.col("therapeutic_labels").alias("therapeuticLabel"),
                pl.col("count"),
            ).alias("area"),
        )
        .group_by("id")
        .agg(pl.col("area").alias("indicationTherapeuticAreas"))
    )


def process_indications(
    indications_raw: pl.DataFrame,
    disease_raw: pl.DataFrame,
    split_packed: bool = True,
) -> pl.DataFrame:
    """
    Build one ``indications`` set per drug.

    Disease metadata is joined left-outer; indications whose disease is
    missing from the dictionary are kept with null metadata.

    Returns:
        DataFrame of ``id``, ``indications`` and ``indicationTherapeuticAreas``
    """
    console.print("  Processing indications...")
    references = aggregate_references(indications_raw, split_packed=split_packed)
    joined = references.join(efo_lookup(disease_raw), on="efo_id", how="left")

    df = nest_indications(joined).join(therapeutic_areas(joined), on="id", how="left")
    console.print(f"    [green]✓[/] indications: {len(df):,} drugs")
    return df
