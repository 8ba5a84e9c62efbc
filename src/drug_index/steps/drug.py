"""
Drug step.

Consolidates ChEMBL molecules, indications and mechanisms of action with
DrugBank ids and evidence linkages into the ``drugs-beta`` dataset.
"""

import polars as pl

from drug_index.steps.base import BaseStep
from drug_index.transforms import (
    assemble_drugs,
    linked_targets_and_diseases,
    process_indications,
    process_mechanisms,
    process_molecules,
)


class DrugStep(BaseStep):
    """Build drug records for the search index."""

    step_key = "drug"
    name = "Drug"
    inputs = (
        "chembl_indication",
        "chembl_mechanism",
        "chembl_molecule",
        "chembl_target",
        "drugbank_to_chembl",
        "disease",
        "target",
        "evidence",
    )
    optional_inputs = ("drug_extensions",)

    def transform(self) -> dict[str, pl.DataFrame]:
        frames = self.frames

        mechanisms = process_mechanisms(
            frames["chembl_mechanism"], frames["chembl_target"], frames["target"]
        )
        indications = process_indications(
            frames["chembl_indication"],
            frames["disease"],
            split_packed=self.config.split_packed_reference_ids,
        )
        molecules = process_molecules(
            frames["chembl_molecule"],
            frames["drugbank_to_chembl"],
            frames.get("drug_extensions"),
        )
        linkages = linked_targets_and_diseases(frames["evidence"])

        self._print_frames(
            {
                "molecules": molecules,
                "indications": indications,
                "mechanisms": mechanisms,
                "linkages": linkages,
            }
        )

        self.results = {"drugs-beta": assemble_drugs(molecules, indications, mechanisms, linkages)}
        return self.results
