"""
Polars transformations from raw inputs to nested index records.

Each module works on eager DataFrames and returns a new frame:
- common: id normalization, packed-id splitting, nesting helpers
- indication: reference aggregation and per-drug indication sets
- mechanism: per-drug mechanisms of action
- molecule: molecule attributes and cross references
- linkage: evidence-derived target and disease linkages
- drug: drug assembly and qualification
- ortholog: per-gene ortholog lists
"""

from drug_index.transforms.drug import assemble_drugs, is_drug
from drug_index.transforms.indication import aggregate_references, process_indications
from drug_index.transforms.linkage import linked_targets_and_diseases
from drug_index.transforms.mechanism import process_mechanisms
from drug_index.transforms.molecule import process_molecules
from drug_index.transforms.ortholog import IdentityCastError, process_orthologs

__all__ = [
    "aggregate_references",
    "process_indications",
    "process_mechanisms",
    "process_molecules",
    "linked_targets_and_diseases",
    "assemble_drugs",
    "is_drug",
    "process_orthologs",
    "IdentityCastError",
]
