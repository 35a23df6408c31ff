"""Schema inference and merging for RNA-seq analysis deliverables.

Classifies vendor deliverable files by name, finds their header rows,
resolves heterogeneous column names to canonical fields and merges the
results into one project dataset for report assembly.

Usage::

    from rnaseq_deliverables import Upload, process_uploads

    result = process_uploads([
        Upload.from_path("DGE_summary.xlsx"),
        Upload.from_path("C1_DGE_results.xlsx"),
        Upload.from_path("C1_GO_enrichment.xlsx"),
    ])
    dataset = result.dataset.to_dict()
"""

from rnaseq_deliverables.config import PipelineConfig
from rnaseq_deliverables.dataset import ProjectDataset
from rnaseq_deliverables.errors import DeliverableError
from rnaseq_deliverables.model import (
    ComparisonRecord,
    FileClassification,
    FileKind,
    FileStatus,
)
from rnaseq_deliverables.pipeline import (
    BatchResult,
    Upload,
    parse_upload,
    process_upload,
    process_uploads,
)

__all__ = [
    "PipelineConfig",
    "ProjectDataset",
    "DeliverableError",
    "ComparisonRecord",
    "FileClassification",
    "FileKind",
    "FileStatus",
    "BatchResult",
    "Upload",
    "parse_upload",
    "process_upload",
    "process_uploads",
]
