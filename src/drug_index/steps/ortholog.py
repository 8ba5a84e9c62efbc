"""
Ortholog step.

Maps homologs of whitelisted species to human genes (``orthologs`` dataset).
"""

import polars as pl

from drug_index.steps.base import BaseStep
from drug_index.transforms import process_orthologs


class OrthologStep(BaseStep):
    """Build linked ortholog records."""

    step_key = "ortholog"
    name = "Orthologs"
    inputs = (
        "homology_dictionary",
        "homology_coding_proteins",
        "homology_gene_dictionary",
    )

    def transform(self) -> dict[str, pl.DataFrame]:
        orthologs = process_orthologs(
            self.frames["homology_dictionary"],
            self.frames["homology_coding_proteins"],
            self.frames["homology_gene_dictionary"],
            target_species=self.config.target_species,
            strict=self.config.strict_identity_cast,
        )
        self.results = {"orthologs": orthologs}
        return self.results
