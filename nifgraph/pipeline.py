"""
NIF Pipeline - File-to-file conversion of annotation records.

Orchestrates the entire flow: record loading → graph construction →
validation → serialization.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from rdflib import Graph

from nifgraph.config.settings import Settings, get_settings
from nifgraph.loaders import AnnotationRecord, RecordRole, load_records
from nifgraph.triples import (
    DEFAULT_SHAPES_PATH,
    NIFDocument,
    TripleSerializer,
    TripleValidator,
)
from nifgraph.triples.serializer import resolve_format
from nifgraph.utils.logging import add_file_handler, remove_file_handler

logger = logging.getLogger(__name__)


# =============================================================================
# PIPELINE RESULT
# =============================================================================


@dataclass
class PipelineResult:
    """Result from a complete pipeline execution."""

    # Timing
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: datetime | None = None
    duration_seconds: float = 0.0

    # Records
    input_path: str | None = None
    records_loaded: int = 0
    records_by_role: dict[str, int] = field(default_factory=dict)

    # Triples
    triples_generated: int = 0

    # Validation
    validation_errors: list[str] = field(default_factory=list)
    validation_warnings: list[str] = field(default_factory=list)

    # Output
    output_format: str | None = None
    output_files: list[str] = field(default_factory=list)

    def finalize(self) -> None:
        """Mark pipeline as complete and calculate duration."""
        self.completed_at = datetime.now()
        self.duration_seconds = (self.completed_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "timing": {
                "started_at": self.started_at.isoformat(),
                "completed_at": self.completed_at.isoformat() if self.completed_at else None,
                "duration_seconds": round(self.duration_seconds, 2),
            },
            "records": {
                "input": self.input_path,
                "loaded": self.records_loaded,
                "by_role": self.records_by_role,
            },
            "triples": {
                "total": self.triples_generated,
            },
            "validation": {
                "errors": len(self.validation_errors),
                "warnings": len(self.validation_warnings),
                "error_details": self.validation_errors[:10],  # First 10
                "warning_details": self.validation_warnings[:10],
            },
            "output": {
                "format": self.output_format,
                "files": self.output_files,
            },
        }

    def print_summary(self) -> None:
        """Print a summary of the pipeline execution."""
        print("\n" + "=" * 60)
        print("📊 PIPELINE EXECUTION SUMMARY")
        print("=" * 60)

        print(f"\n⏱️  Duration: {self.duration_seconds:.2f}s")
        print(f"📁 Records: {self.records_loaded} loaded from {self.input_path}")
        for role, count in sorted(self.records_by_role.items()):
            print(f"   • {role}: {count}")

        print(f"\n🔗 Triples: {self.triples_generated} generated")

        if self.validation_errors:
            print(f"\n❌ Validation Errors: {len(self.validation_errors)}")
        if self.validation_warnings:
            print(f"⚠️  Validation Warnings: {len(self.validation_warnings)}")

        print(f"\n📤 Output Files: {len(self.output_files)}")
        for f in self.output_files:
            print(f"   • {f}")

        print("=" * 60)


# =============================================================================
# PIPELINE
# =============================================================================


class Pipeline:
    """
    nifgraph Pipeline

    Orchestrates:
    1. Loading annotation records from JSON/YAML
    2. Building the NIF graph
    3. Validating output
    4. Serializing to Turtle/N-Triples/RDF/XML

    Usage:
        pipeline = Pipeline()
        result = pipeline.execute("records.json", output_format="nt")
        result.print_summary()
    """

    def __init__(
        self,
        settings: Settings | None = None,
        output_dir: str | Path | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            settings: Configuration settings (uses default if None)
            output_dir: Override directory for output files
        """
        self.settings = settings or get_settings()
        self.output_dir = Path(output_dir) if output_dir else self.settings.paths.output_dir

        # Components (lazy initialization)
        self._serializer: TripleSerializer | None = None
        self._validator: TripleValidator | None = None

        # State
        self._records: list[AnnotationRecord] = []
        self._document: NIFDocument | None = None

        logger.info("Pipeline initialized")
        logger.info("  Output dir: %s", self.output_dir)

    # =========================================================================
    # COMPONENT INITIALIZATION
    # =========================================================================

    @property
    def serializer(self) -> TripleSerializer:
        """Get or create serializer."""
        if self._serializer is None:
            self._serializer = TripleSerializer()
        return self._serializer

    @property
    def validator(self) -> TripleValidator:
        """Get or create validator."""
        if self._validator is None:
            shapes_path = None
            if self.settings.validation.shacl:
                shapes_path = self.settings.paths.shapes_path or DEFAULT_SHAPES_PATH
            self._validator = TripleValidator(shapes_path=shapes_path)
        return self._validator

    @property
    def graph(self) -> Graph | None:
        return self._document.graph if self._document is not None else None

    # =========================================================================
    # PIPELINE STAGES
    # =========================================================================

    def load_records(self, input_path: str | Path) -> list[AnnotationRecord]:
        """Load annotation records from a JSON or YAML file."""
        logger.info("Loading records from %s", input_path)
        self._records = load_records(input_path)
        return self._records

    def build(self, records: list[AnnotationRecord] | None = None) -> NIFDocument:
        """
        Build the NIF document from records.

        Args:
            records: Records to convert (uses loaded records if None)

        Returns:
            NIFDocument holding the built graph
        """
        records = self._records if records is None else records
        self._document = NIFDocument(records)
        logger.info("Built graph with %d triples from %d records", len(self._document), len(records))
        return self._document

    def validate(self, graph: Graph | None = None) -> tuple[list[str], list[str]]:
        """
        Validate generated triples.

        Args:
            graph: Graph to validate (uses built graph if None)

        Returns:
            Tuple of (errors, warnings)
        """
        graph = graph if graph is not None else self.graph
        if graph is None:
            raise ValueError("No graph to validate. Build the document first.")

        result = self.validator.validate(graph)
        return result.errors, result.warnings

    def serialize(
        self,
        output_path: str | Path,
        output_format: str | None = None,
    ) -> str:
        """
        Serialize the built graph to a file.

        Args:
            output_path: Output file path
            output_format: Output format (turtle, nt, xml)

        Returns:
            Path to output file
        """
        if self._document is None:
            raise ValueError("No graph to serialize. Build the document first.")

        fmt = output_format or self.settings.output.format
        self.serializer.to_file(self._document.graph, output_path, format=fmt)
        return str(output_path)

    # =========================================================================
    # MAIN EXECUTION
    # =========================================================================

    def _create_run_directory(self) -> Path:
        """
        Create a unique directory for this pipeline run.

        Returns:
            Path to the run directory (e.g., output/nif_run_20260203_120000_000000/)
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        run_dir = self.output_dir / f"nif_run_{timestamp}"
        run_dir.mkdir(parents=True, exist_ok=True)
        return run_dir

    def _save_metadata(self, run_dir: Path, result: PipelineResult) -> str:
        """Save execution metadata to JSON file."""
        metadata_path = run_dir / "metadata.json"
        metadata = result.to_dict()
        metadata["run_info"] = {"run_directory": str(run_dir)}

        with open(metadata_path, "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2, ensure_ascii=False, default=str)

        logger.info("Saved metadata to %s", metadata_path)
        return str(metadata_path)

    def execute(
        self,
        input_path: str | Path,
        output_format: str | None = None,
        skip_validation: bool = False,
        enable_file_logging: bool = True,
    ) -> PipelineResult:
        """
        Execute the complete pipeline.

        Args:
            input_path: JSON or YAML file with annotation records
            output_format: Override output format
            skip_validation: Skip validation step
            enable_file_logging: Save execution log to file (default: True)

        Returns:
            PipelineResult with execution summary
        """
        result = PipelineResult(input_path=str(input_path))
        fmt = output_format or self.settings.output.format
        ext = resolve_format(fmt)["extension"]
        result.output_format = fmt

        run_dir = self._create_run_directory()
        logger.info("Run directory: %s", run_dir)

        if enable_file_logging:
            add_file_handler(run_dir / "execution.log")

        try:
            # Stage 1: Load records
            logger.info("--- STAGE 1: Loading records ---")
            records = self.load_records(input_path)
            result.records_loaded = len(records)
            for role in RecordRole:
                result.records_by_role[role.value] = sum(1 for r in records if r.role is role)

            # Stage 2: Build graph
            logger.info("--- STAGE 2: Building NIF graph ---")
            document = self.build()
            result.triples_generated = len(document)

            # Stage 3: Validate
            if not skip_validation and self.settings.validation.enabled:
                logger.info("--- STAGE 3: Validating NIF graph ---")
                errors, warnings = self.validate()
                result.validation_errors = errors
                result.validation_warnings = warnings

            # Stage 4: Serialize to run directory
            logger.info("--- STAGE 4: Serializing output ---")
            out_path = run_dir / f"{Path(input_path).stem}{ext}"
            result.output_files.append(self.serialize(out_path, fmt))

        except Exception as e:
            logger.exception("Pipeline execution failed: %s", e)
            raise

        finally:
            result.finalize()
            result.output_files.append(self._save_metadata(run_dir, result))

            if enable_file_logging:
                remove_file_handler()
                log_path = run_dir / "execution.log"
                if log_path.exists():
                    result.output_files.append(str(log_path))

        return result
