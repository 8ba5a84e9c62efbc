"""
Pipeline steps.

Each step reads named inputs, transforms them and writes named outputs:
- drug: ``drugs-beta``
- ortholog: ``orthologs``
"""

from drug_index.steps.base import BaseStep
from drug_index.steps.drug import DrugStep
from drug_index.steps.ortholog import OrthologStep

STEPS: dict[str, type[BaseStep]] = {
    OrthologStep.step_key: OrthologStep,
    DrugStep.step_key: DrugStep,
}

__all__ = ["BaseStep", "DrugStep", "OrthologStep", "STEPS"]
