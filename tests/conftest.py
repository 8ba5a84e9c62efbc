"""Pytest configuration and fixtures."""

from pathlib import Path

import polars as pl
import pytest

from drug_index.config import Settings

REF = pl.Struct({"ref_id": pl.String, "ref_type": pl.String, "ref_url": pl.String})

INDICATION_SCHEMA = {
    "molecule_chembl_id": pl.String,
    "efo_id": pl.String,
    "max_phase_for_ind": pl.Float64,
    "indication_refs": pl.List(REF),
}

MECHANISM_SCHEMA = {
    "molecule_chembl_id": pl.String,
    "mechanism_of_action": pl.String,
    "action_type": pl.String,
    "target_chembl_id": pl.String,
    "mechanism_refs": pl.List(REF),
}

MOLECULE_SCHEMA = {
    "molecule_chembl_id": pl.String,
    "pref_name": pl.String,
    "molecule_type": pl.String,
    "molecule_structures": pl.Struct(
        {"canonical_smiles": pl.String, "standard_inchi_key": pl.String}
    ),
    "molecule_hierarchy": pl.Struct(
        {"molecule_chembl_id": pl.String, "parent_chembl_id": pl.String}
    ),
    "max_phase": pl.Float64,
    "first_approval": pl.Int64,
    "withdrawn_flag": pl.Boolean,
    "black_box_warning": pl.Int64,
    "cross_references": pl.List(
        pl.Struct({"xref_id": pl.String, "xref_name": pl.String, "xref_src": pl.String})
    ),
    "molecule_synonyms": pl.List(
        pl.Struct({"molecule_synonym": pl.String, "syn_type": pl.String})
    ),
}


def ref(ref_id: str, ref_type: str, ref_url: str) -> dict:
    return {"ref_id": ref_id, "ref_type": ref_type, "ref_url": ref_url}


def molecule(chembl_id: str, **fields) -> dict:
    record = {
        "molecule_chembl_id": chembl_id,
        "pref_name": None,
        "molecule_type": "Small molecule",
        "molecule_structures": {"canonical_smiles": "C", "standard_inchi_key": f"{chembl_id}-KEY"},
        "molecule_hierarchy": {"molecule_chembl_id": chembl_id, "parent_chembl_id": chembl_id},
        "max_phase": None,
        "first_approval": None,
        "withdrawn_flag": False,
        "black_box_warning": 0,
        "cross_references": [],
        "molecule_synonyms": [],
    }
    record.update(fields)
    return record


@pytest.fixture
def indications_raw() -> pl.DataFrame:
    """ChEMBL indications: one unlinkable row, one without references."""
    return pl.DataFrame(
        [
            {
                "molecule_chembl_id": "CHEMBL1",
                "efo_id": "EFO:0000001",
                "max_phase_for_ind": 1.0,
                "indication_refs": [ref("NCT1,NCT2,NCT3", "ClinicalTrials", "https://ct.gov/1")],
            },
            {
                "molecule_chembl_id": "CHEMBL1",
                "efo_id": "EFO:0000001",
                "max_phase_for_ind": 3.0,
                "indication_refs": [ref("fda1", "FDA", "https://fda.gov/1")],
            },
            {
                "molecule_chembl_id": "CHEMBL1",
                "efo_id": "EFO:0000001",
                "max_phase_for_ind": 2.0,
                "indication_refs": [ref("NCT4", "ClinicalTrials", "https://ct.gov/4")],
            },
            {
                "molecule_chembl_id": "CHEMBL1",
                "efo_id": None,
                "max_phase_for_ind": 4.0,
                "indication_refs": [ref("fda2", "FDA", "https://fda.gov/2")],
            },
            {
                "molecule_chembl_id": "CHEMBL2",
                "efo_id": "MONDO:0000002",
                "max_phase_for_ind": 4.0,
                "indication_refs": [ref("dm1", "DailyMed", "https://dailymed/1")],
            },
            {
                "molecule_chembl_id": "CHEMBL3",
                "efo_id": "EFO:0000003",
                "max_phase_for_ind": 2.0,
                "indication_refs": [],
            },
        ],
        schema=INDICATION_SCHEMA,
    )


@pytest.fixture
def disease_raw() -> pl.DataFrame:
    """Disease dictionary; MONDO_0000002 is deliberately missing."""
    return pl.DataFrame(
        {
            "code": [
                "http://www.ebi.ac.uk/efo/EFO_0000001",
                "http://www.ebi.ac.uk/efo/EFO_0000003",
            ],
            "label": ["disease one", "disease three"],
            "therapeutic_codes": [["EFO_0000319", "EFO_0000540"], ["EFO_0000319"]],
            "therapeutic_labels": [
                ["cardiovascular disease", "immune system disease"],
                ["cardiovascular disease"],
            ],
        }
    )


@pytest.fixture
def mechanism_raw() -> pl.DataFrame:
    return pl.DataFrame(
        [
            {
                "molecule_chembl_id": "CHEMBL1",
                "mechanism_of_action": "Cyclooxygenase inhibitor",
                "action_type": "INHIBITOR",
                "target_chembl_id": "CHEMBL_T1",
                "mechanism_refs": [
                    ref("r1", "Wikipedia", "https://wiki/1"),
                    ref("r2", "PubMed", "https://pubmed/2"),
                    ref("r3", "PubMed", "https://pubmed/3"),
                ],
            },
            {
                "molecule_chembl_id": "CHEMBL4",
                "mechanism_of_action": "Receptor agonist",
                "action_type": "AGONIST",
                "target_chembl_id": None,
                "mechanism_refs": [],
            },
        ],
        schema=MECHANISM_SCHEMA,
    )


@pytest.fixture
def target_raw() -> pl.DataFrame:
    return pl.DataFrame(
        [
            {
                "target_chembl_id": "CHEMBL_T1",
                "pref_name": "Cyclooxygenase",
                "target_type": "SINGLE PROTEIN",
                "target_components": [{"accession": "P23219"}, {"accession": "P35354"}],
            },
        ]
    )


@pytest.fixture
def gene_raw() -> pl.DataFrame:
    return pl.DataFrame(
        [
            {"id": "ENSG1", "proteinIds": [{"id": "P23219", "source": "uniprot_swissprot"}]},
            {"id": "ENSG2", "proteinIds": [{"id": "P35354", "source": "uniprot_swissprot"}]},
            {"id": "ENSG3", "proteinIds": [{"id": "Q99999", "source": "uniprot_trembl"}]},
        ]
    )


@pytest.fixture
def molecule_raw() -> pl.DataFrame:
    """
    CHEMBL1: indications and a mechanism
    CHEMBL2: indications only
    CHEMBL4: mechanism only
    CHEMBL5: DrugBank id only
    CHEMBL6: no drug signal, child of CHEMBL1
    """
    return pl.DataFrame(
        [
            molecule(
                "CHEMBL1",
                pref_name="ASPIRIN",
                max_phase=4.0,
                first_approval=1950,
                cross_references=[{"xref_id": "2244", "xref_name": "aspirin", "xref_src": "PubChem"}],
                molecule_synonyms=[
                    {"molecule_synonym": "Aspirin", "syn_type": "TRADE_NAME"},
                    {"molecule_synonym": "Acetylsalicylic acid", "syn_type": "INN"},
                    {"molecule_synonym": "Acetylsalicylic acid", "syn_type": "USAN"},
                ],
            ),
            molecule(
                "CHEMBL2",
                max_phase=4.0,
                black_box_warning=1,
                molecule_synonyms=[{"molecule_synonym": "Zetamab", "syn_type": "INN"}],
            ),
            molecule("CHEMBL4", molecule_type="Antibody", max_phase=2.0),
            molecule("CHEMBL5", withdrawn_flag=True),
            molecule(
                "CHEMBL6",
                molecule_hierarchy={"molecule_chembl_id": "CHEMBL6", "parent_chembl_id": "CHEMBL1"},
            ),
        ],
        schema=MOLECULE_SCHEMA,
    )


@pytest.fixture
def drugbank_raw() -> pl.DataFrame:
    return pl.DataFrame({"From src:'1'": ["CHEMBL5"], "To src:'2'": ["DB00001"]})


@pytest.fixture
def evidence_raw() -> pl.DataFrame:
    return pl.DataFrame(
        {
            "sourceId": ["chembl", "chembl", "chembl", "europepmc"],
            "drugId": [
                "CHEMBL1",
                "CHEMBL1",
                "http://identifiers.org/chembl.compound/CHEMBL4",
                "CHEMBL6",
            ],
            "targetId": ["ENSG1", "ENSG1", "ENSG2", "ENSG3"],
            "diseaseId": ["EFO_0000001", "EFO_0000003", "EFO_0000002", "EFO_0000004"],
        }
    )


@pytest.fixture
def homology_dict() -> pl.DataFrame:
    return pl.DataFrame(
        {
            "#name": ["Human", "Mouse", "Rat", "Zebrafish"],
            "species": ["homo_sapiens", "mus_musculus", "rattus_norvegicus", "danio_rerio"],
            "taxonomy_id": ["9606", "10090", "10116", "7955"],
        }
    )


@pytest.fixture
def coding_proteins() -> pl.DataFrame:
    """Homology rows as read from the TSV (every column a string)."""
    return pl.DataFrame(
        {
            "gene_stable_id": ["ENSG1", "ENSG1", "ENSG1", "ENSG2", "ENSG3", "ENSG4"],
            "homology_species": [
                "mus_musculus",
                "rattus_norvegicus",
                "mus_musculus",
                "mus_musculus",
                "homo_sapiens",
                "danio_rerio",
            ],
            "homology_gene_stable_id": [
                "ENSMUSG1",
                "ENSRNOG1",
                "ENSMUSG2",
                "ENSMUSG3",
                "ENSG9",
                "ENSDARG1",
            ],
            "homology_type": [
                "ortholog_one2one",
                "ortholog_one2one",
                "ortholog_one2many",
                "ortholog_one2one",
                "within_species_paralog",
                "ortholog_one2one",
            ],
            "identity": ["85.5", "80", "50", "70", "abc", "40"],
            "homology_identity": ["86.1", "81", "40", "70", "60", "42"],
            "is_high_confidence": ["1", "1", "0", "1", "1", "1"],
        }
    )


@pytest.fixture
def homology_gene_dict() -> pl.DataFrame:
    """Gene symbols; ENSMUSG3 has none."""
    return pl.DataFrame(
        {
            "homology_gene_stable_id": ["ENSMUSG1", "ENSMUSG2", "ENSRNOG1", "ENSG9", "ENSDARG1"],
            "targetGeneSymbol": ["Ptgs1", "Ptgs2", "Ptgs1", "PARA", "ptgs1"],
        }
    )


@pytest.fixture
def settings_factory(tmp_path: Path):
    """Settings rooted in a temporary directory."""

    def make(**overrides) -> Settings:
        values = {
            "input_dir": tmp_path / "inputs",
            "output_dir": tmp_path / "outputs",
        }
        values.update(overrides)
        return Settings(**values)

    return make


@pytest.fixture
def drug_inputs(
    tmp_path: Path,
    indications_raw,
    mechanism_raw,
    molecule_raw,
    target_raw,
    drugbank_raw,
    disease_raw,
    gene_raw,
    evidence_raw,
) -> Path:
    """Write every drug input to its default location under ``tmp_path / inputs``."""
    root = tmp_path / "inputs"
    (root / "chembl").mkdir(parents=True)
    (root / "drugbank").mkdir()
    for name in ("disease", "target", "evidence"):
        (root / name).mkdir()

    indications_raw.write_ndjson(root / "chembl" / "chembl_indication.jsonl")
    mechanism_raw.write_ndjson(root / "chembl" / "chembl_mechanism.jsonl")
    molecule_raw.write_ndjson(root / "chembl" / "chembl_molecule.jsonl")
    target_raw.write_ndjson(root / "chembl" / "chembl_target.jsonl")
    drugbank_raw.write_csv(root / "drugbank" / "drugbank_chembl.tsv", separator="\t")
    disease_raw.write_parquet(root / "disease" / "part-0000.parquet")
    gene_raw.write_parquet(root / "target" / "part-0000.parquet")
    evidence_raw.write_parquet(root / "evidence" / "part-0000.parquet")
    return root


@pytest.fixture
def ortholog_inputs(tmp_path: Path, homology_dict, coding_proteins, homology_gene_dict) -> Path:
    """Write the homology inputs to their default locations under ``tmp_path / inputs``."""
    root = tmp_path / "inputs" / "homology"
    root.mkdir(parents=True)
    homology_dict.write_csv(root / "species_EnsemblVertebrates.txt", separator="\t")
    coding_proteins.write_csv(root / "protein_default.homologies.tsv", separator="\t")
    homology_gene_dict.write_csv(
        root / "homology_gene_dictionary.tsv", separator="\t", include_header=False
    )
    return root
