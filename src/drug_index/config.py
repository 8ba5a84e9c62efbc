"""
Configuration management for drug_index.

Uses pydantic-settings for environment variable loading and validation.
Nested input resources can be overridden with a double underscore, e.g.
``DRUG_INDEX_INPUTS__CHEMBL_MOLECULE__PATH=/data/molecule.jsonl``.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

InputFormat = Literal["parquet", "json", "csv"]
OutputFormat = Literal["parquet", "json"]


class InputResource(BaseModel):
    """Location and format of one named input dataset."""

    path: Path
    format: InputFormat = "parquet"
    separator: str = ","
    has_header: bool = True
    columns: list[str] | None = Field(
        default=None,
        description="Column names for headerless delimited files",
    )


class Inputs(BaseModel):
    """Named input datasets, relative to ``Settings.input_dir`` unless absolute."""

    chembl_indication: InputResource = InputResource(
        path=Path("chembl/chembl_indication.jsonl"), format="json"
    )
    chembl_mechanism: InputResource = InputResource(
        path=Path("chembl/chembl_mechanism.jsonl"), format="json"
    )
    chembl_molecule: InputResource = InputResource(
        path=Path("chembl/chembl_molecule.jsonl"), format="json"
    )
    chembl_target: InputResource = InputResource(
        path=Path("chembl/chembl_target.jsonl"), format="json"
    )
    drugbank_to_chembl: InputResource = InputResource(
        path=Path("drugbank/drugbank_chembl.tsv"), format="csv", separator="\t"
    )
    disease: InputResource = InputResource(path=Path("disease"))
    target: InputResource = InputResource(path=Path("target"))
    evidence: InputResource = InputResource(path=Path("evidence"))
    drug_extensions: InputResource | None = Field(
        default=None,
        description="Optional JSON lines of extra synonyms and cross references per molecule id",
    )
    homology_dictionary: InputResource = InputResource(
        path=Path("homology/species_EnsemblVertebrates.txt"), format="csv", separator="\t"
    )
    homology_coding_proteins: InputResource = InputResource(
        path=Path("homology/protein_default.homologies.tsv"), format="csv", separator="\t"
    )
    homology_gene_dictionary: InputResource = InputResource(
        path=Path("homology/homology_gene_dictionary.tsv"),
        format="csv",
        separator="\t",
        has_header=False,
        columns=["homology_gene_stable_id", "targetGeneSymbol"],
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DRUG_INDEX_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    # Data directories
    input_dir: Path = Field(default=Path("data/inputs"), description="Root of the raw inputs")
    output_dir: Path = Field(default=Path("data/outputs"), description="Where outputs are written")
    output_format: OutputFormat = Field(default="parquet", description="Output file format")

    inputs: Inputs = Field(default_factory=Inputs)

    # Orthologs
    target_species: list[str] = Field(
        default=[
            "9606-human",
            "9598-chimpanzee",
            "9544-macaque",
            "10090-mouse",
            "10116-rat",
            "9986-rabbit",
            "10141-guineapig",
            "9615-dog",
            "9823-pig",
            "8364-frog",
            "7955-zebrafish",
            "7227-fly",
            "6239-worm",
        ],
        description="Whitelisted species as taxonomy id, optionally suffixed with '-name'",
    )
    strict_identity_cast: bool = Field(
        default=False,
        description="Fail on non-numeric ortholog identity percentages instead of nulling them",
    )

    # Indications
    split_packed_reference_ids: bool = Field(
        default=True,
        description="Split comma-packed reference ids into one id per row",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def debug(self) -> bool:
        """Whether intermediate frame details should be printed."""
        return self.log_level == "DEBUG"

    def input_path(self, resource: InputResource) -> Path:
        """Resolve an input resource path against the input directory."""
        if resource.path.is_absolute():
            return resource.path
        return self.input_dir / resource.path

    def output_path(self, name: str) -> Path:
        """Path for a named output dataset."""
        suffix = "parquet" if self.output_format == "parquet" else "jsonl"
        return self.output_dir / f"{name}.{suffix}"


# Global settings instance
settings = Settings()
