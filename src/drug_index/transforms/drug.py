"""
Drug assembly: molecules joined with indications, mechanisms and linkages.
"""

import polars as pl
from rich.console import Console

from drug_index.transforms.description import add_description

console = Console()


def is_drug() -> pl.Expr:
    """
    A molecule counts as a drug if it has a DrugBank cross reference, an
    indication or a mechanism of action.
    """
    has_drugbank = (
        pl.col("crossReferences")
        .list.eval(pl.element().struct.field("source") == "drugbank")
        .list.any()
        .fill_null(False)
    )
    return has_drugbank | pl.col("indications").is_not_null() | pl.col("mechanismsOfAction").is_not_null()


def assemble_drugs(
    molecules: pl.DataFrame,
    indications: pl.DataFrame,
    mechanisms: pl.DataFrame,
    linkages: pl.DataFrame,
) -> pl.DataFrame:
    """
    Join all drug components on ``id`` and keep molecules that qualify as drugs.

    Joins are left-outer so every molecule survives until the drug filter;
    each right-hand frame holds at most one row per id.

    Returns:
        Drug records with a ``description`` column
    """
    console.print("  Joining molecules, indications, mechanisms of action and linkages...")
    df = (
        molecules.join(indications, on="id", how="left")
        .join(mechanisms, on="id", how="left")
        .join(linkages, on="id", how="left")
    )
    drugs = df.filter(is_drug()).pipe(add_description)
    console.print(f"    [green]✓[/] drugs: {len(drugs):,} of {len(df):,} molecules")
    return drugs
