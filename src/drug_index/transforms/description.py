"""
Free-text drug descriptions.
"""

import polars as pl

PHASE_NAMES = {
    4.0: "IV",
    3.0: "III",
    2.0: "II",
    1.0: "I",
    0.5: "I (Early)",
}


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def describe_drug(
    drug_type: str | None,
    max_phase: float | None,
    first_approval: int | None,
    indication_phases: list[float] | None,
    withdrawn: bool | None = False,
    black_box_warning: bool | None = False,
) -> str:
    """
    Describe a drug in one or a few sentences.

    Example:
        "Small molecule drug with a maximum clinical trial phase of IV (across all
        indications) that was first approved in 1998 and has 2 approved and 1
        investigational indication."

    Indications in phase IV count as approved; every other phase counts as
    investigational. "(across all indications)" is added only when more than
    one indication phase is known, whether or not the disease is in the
    disease dictionary.
    """
    phases = [p for p in indication_phases or [] if p is not None]
    approved = sum(1 for p in phases if p == 4)
    investigational = len(phases) - approved

    text = f"{(drug_type or 'Unknown').capitalize()} drug"
    if max_phase in PHASE_NAMES:
        text += f" with a maximum clinical trial phase of {PHASE_NAMES[max_phase]}"
        if len(phases) > 1:
            text += " (across all indications)"
    if first_approval:
        text += f" that was first approved in {first_approval}"

    if approved and investigational:
        text += f" and has {approved} approved and {_plural(investigational, 'investigational indication')}"
    elif approved:
        text += f" and has {_plural(approved, 'approved indication')}"
    elif investigational:
        text += f" and has {_plural(investigational, 'investigational indication')}"
    text += "."

    if withdrawn:
        text += " It was withdrawn in at least one region."
    if black_box_warning:
        text += " This drug has a black box warning from the FDA."
    return text


def add_description(df: pl.DataFrame) -> pl.DataFrame:
    """Add a ``description`` column derived from molecule and indication fields."""
    phases = (
        pl.col("indications")
        .struct.field("rows")
        .list.eval(pl.element().struct.field("maxPhaseForIndication"))
    )
    return df.with_columns(
        pl.struct(
            pl.col("drugType").alias("drug_type"),
            pl.col("maximumClinicalTrialPhase").alias("max_phase"),
            pl.col("yearOfFirstApproval").alias("first_approval"),
            phases.alias("indication_phases"),
            pl.col("hasBeenWithdrawn").alias("withdrawn"),
            pl.col("blackBoxWarning").alias("black_box_warning"),
        )
        .map_elements(lambda row: describe_drug(**row), return_dtype=pl.String)
        .alias("description")
    )
