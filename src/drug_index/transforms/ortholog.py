"""
Orthologs mapped to Ensembl human gene ids.

Sources:
- species dictionary: Ensembl ``species_EnsemblVertebrates.txt``
- coding proteins: Ensembl Compara homologies for homo_sapiens
- homology gene dictionary: headerless ``gene_id<TAB>gene_name`` file
"""

import polars as pl
from rich.console import Console

from drug_index.transforms.common import nest

console = Console()

ORTHOLOG_FIELDS = [
    "speciesId",
    "speciesName",
    "homologyType",
    "targetGeneId",
    "targetGeneSymbol",
    "queryPercentageIdentity",
    "targetPercentageIdentity",
]

IDENTITY_COLUMNS = {
    "identity": "queryPercentageIdentity",
    "homology_identity": "targetPercentageIdentity",
}


class IdentityCastError(ValueError):
    """Raised in strict mode when a percentage identity is not numeric."""


def species_whitelist(target_species: list[str]) -> list[str]:
    """Taxonomy ids from whitelist entries, e.g. ``"10090-mouse"`` -> ``"10090"``."""
    return [species.split("-", 1)[0] for species in target_species]


def whitelisted_species(homology_dict: pl.DataFrame, target_species: list[str]) -> pl.DataFrame:
    """Species dictionary rows whose taxonomy id is whitelisted."""
    return homology_dict.select(
        pl.col("#name").alias("name"),
        pl.col("species").alias("speciesName"),
        pl.col("taxonomy_id").cast(pl.String),
    ).filter(pl.col("taxonomy_id").is_in(species_whitelist(target_species)))


def gene_symbol_lookup(homology_gene_dict: pl.DataFrame) -> pl.DataFrame:
    """
    Homology gene id to symbol, taken from the first two columns.

    A gene id listed more than once keeps its first symbol, so each homologue
    appears once.
    """
    gene_id, symbol = homology_gene_dict.columns[:2]
    return homology_gene_dict.select(
        pl.col(gene_id).alias("homology_gene_stable_id"),
        pl.col(symbol).alias("targetGeneSymbol"),
    ).unique(subset=["homology_gene_stable_id"], keep="first", maintain_order=True)


def cast_identities(df: pl.DataFrame, strict: bool = False) -> pl.DataFrame:
    """
    Cast percentage identities to floats.

    Values that are not numeric become null. With ``strict`` they raise
    ``IdentityCastError`` instead.
    """
    cast = df.with_columns(
        [
            pl.col(source).cast(pl.Float64, strict=False).alias(target)
            for source, target in IDENTITY_COLUMNS.items()
        ]
    )
    if strict:
        for source, target in IDENTITY_COLUMNS.items():
            failed = cast.filter(pl.col(source).is_not_null() & pl.col(target).is_null())
            if len(failed):
                sample = failed.get_column(source).head(5).to_list()
                raise IdentityCastError(
                    f"{len(failed):,} non-numeric values in '{source}', e.g. {sample}"
                )
    return cast.drop(list(IDENTITY_COLUMNS))


def process_orthologs(
    homology_dict: pl.DataFrame,
    coding_proteins: pl.DataFrame,
    homology_gene_dict: pl.DataFrame,
    target_species: list[str],
    strict: bool = False,
) -> pl.DataFrame:
    """
    Group high-confidence homologs of whitelisted species by human gene.

    Homologs of species outside the whitelist or without a gene symbol are
    dropped.

    Args:
        homology_dict: Species dictionary with ``#name``, ``species`` and ``taxonomy_id``
        coding_proteins: Homology rows
        homology_gene_dict: Gene id to symbol mapping
        target_species: Whitelisted species, see ``species_whitelist``
        strict: Raise on non-numeric percentage identities

    Returns:
        DataFrame of ``humanGeneId`` and ``homologues`` (list of ortholog structs)
    """
    console.print("  Processing homologs...")
    species = whitelisted_species(homology_dict, target_species)

    homologs = (
        coding_proteins.filter(pl.col("is_high_confidence").cast(pl.Int64, strict=False) == 1)
        .join(species, left_on="homology_species", right_on="speciesName", how="inner")
        .join(gene_symbol_lookup(homology_gene_dict), on="homology_gene_stable_id", how="inner")
        .select(
            pl.col("gene_stable_id").alias("humanGeneId"),
            pl.col("taxonomy_id").alias("speciesId"),
            pl.col("name").alias("speciesName"),
            pl.col("homology_type").alias("homologyType"),
            pl.col("homology_gene_stable_id").alias("targetGeneId"),
            pl.col("targetGeneSymbol"),
            *IDENTITY_COLUMNS,
        )
        .pipe(cast_identities, strict=strict)
    )

    df = (
        nest(homologs, ORTHOLOG_FIELDS, "homologues")
        .group_by("humanGeneId")
        .agg(pl.col("homologues"))
    )
    console.print(f"    [green]✓[/] orthologs: {len(df):,} human genes")
    return df
