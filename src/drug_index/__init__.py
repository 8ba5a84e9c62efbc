"""
drug_index: drug and ortholog records for a search index

Batch ETL that consolidates ChEMBL molecules, indications and mechanisms of
action, DrugBank ids and evidence linkages into one nested record per drug,
and maps Ensembl homologs onto human genes:

    molecule + indications + mechanisms + linkages → drugs-beta
    species + homologies + gene symbols → orthologs

All transformations are polars expressions over in-memory frames.
"""

__version__ = "0.1.0"
