"""
Deliverables pipeline orchestrator.

Classifies each uploaded file, runs the matching extractor and merges the
result into a ProjectDataset. Files are parsed concurrently; merges are
applied in upload order so the same file set always produces the same
dataset. A failing file is reported on its own status and never aborts
the batch.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from .config import PipelineConfig
from .dataset import ProjectDataset
from .errors import DeliverableError, GridReadError, MissingGroupIdentifier
from .model import FileKind, FileStatus
from .parsers.classifier import classify_file
from .parsers.dge_extractor import extract_comparison_dge
from .parsers.enrichment_extractor import extract_enrichment
from .parsers.gtf_extractor import aggregate_transcripts
from .parsers.summary_extractor import extract_dge_summary, extract_stats_table
from .parsers.tables import read_grid

logger = logging.getLogger(__name__)


@dataclass
class Upload:
    """A named byte buffer, as received from the upload step."""

    name: str
    data: bytes

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "Upload":
        path = Path(path)
        return cls(name=path.name, data=path.read_bytes())


@dataclass
class ParsedFile:
    """Extractor output for one upload, not yet merged."""

    status: FileStatus
    payload: Any = None


@dataclass
class BatchResult:
    """Container for a processed batch."""

    dataset: ProjectDataset
    statuses: List[FileStatus] = field(default_factory=list)

    @property
    def failed(self) -> List[FileStatus]:
        return [s for s in self.statuses if s.status == "error"]

    def get_stats(self) -> dict:
        stats: dict = {}
        for status in self.statuses:
            stats[status.status] = stats.get(status.status, 0) + 1
        return stats


def _decode_text(upload: Upload, encoding: str) -> str:
    try:
        return upload.data.decode(encoding)
    except UnicodeDecodeError as exc:
        raise GridReadError(f"Could not decode text as {encoding}: {exc}", upload.name) from exc


def _extract(upload: Upload, kind: FileKind, config: PipelineConfig) -> Any:
    if kind in (FileKind.GLOBAL_STATS, FileKind.MAPPING):
        return extract_stats_table(read_grid(upload.data, upload.name, config.text_encoding))
    if kind.is_annotation:
        return aggregate_transcripts(_decode_text(upload, config.text_encoding), upload.name)
    if kind == FileKind.TEMPLATE:
        return _decode_text(upload, config.text_encoding)
    if kind == FileKind.DGE_SUMMARY:
        return extract_dge_summary(read_grid(upload.data, upload.name, config.text_encoding))
    if kind == FileKind.COMPARISON_DGE:
        return extract_comparison_dge(read_grid(upload.data, upload.name, config.text_encoding))
    if kind in (FileKind.COMPARISON_GO, FileKind.COMPARISON_KEGG):
        return extract_enrichment(read_grid(upload.data, upload.name, config.text_encoding))
    return None


def parse_upload(upload: Upload, config: Optional[PipelineConfig] = None) -> ParsedFile:
    """
    Classify and parse one upload without touching any dataset.

    Args:
        upload: The uploaded file
        config: Runtime options (defaults if not provided)

    Returns:
        ParsedFile with the file status and the extractor output
    """
    config = config or PipelineConfig()
    classification = classify_file(upload.name)
    status = FileStatus(
        name=upload.name,
        kind=classification.kind,
        group_id=classification.group_id,
    )

    if classification.kind == FileKind.UNKNOWN:
        logger.warning("File %s type unknown, added to deliverables list only", upload.name)
        status.status = "warning"
        status.message = "Type unknown, added to deliverables list only"
        return ParsedFile(status=status)

    if classification.kind == FileKind.DELIVERABLE_ONLY:
        status.status = "success"
        return ParsedFile(status=status)

    try:
        if classification.kind.is_comparison and not classification.group_id:
            label = classification.kind.value.replace("comparison_", "").upper()
            raise MissingGroupIdentifier(
                f"Detected {label} file but missing comparison id "
                f"(e.g. 'C1', 'Comp1') in filename.",
                upload.name,
            )
        payload = _extract(upload, classification.kind, config)
    except DeliverableError as exc:
        logger.warning("Failed to process %s: %s", upload.name, exc.message)
        status.status = "error"
        status.message = exc.message
        return ParsedFile(status=status)
    except Exception as exc:
        logger.exception("Unexpected error while parsing %s", upload.name)
        status.status = "error"
        status.message = f"Parsing failed: {exc}"
        return ParsedFile(status=status)

    status.status = "success"
    return ParsedFile(status=status, payload=payload)


def merge_parsed(dataset: ProjectDataset, parsed: ParsedFile) -> FileStatus:
    """Merge one parsed upload into the dataset and record its status."""
    status = parsed.status
    payload = parsed.payload
    kind = status.kind

    if status.status == "success" and payload is not None:
        if kind in (FileKind.GLOBAL_STATS, FileKind.MAPPING):
            dataset.set_stats_table(kind, payload, status.name)
        elif kind.is_annotation:
            dataset.add_transcript_summary(kind, payload)
        elif kind == FileKind.TEMPLATE:
            dataset.set_template(payload, status.name)
        elif kind == FileKind.DGE_SUMMARY:
            dataset.merge_dge_summary(payload, status.name)
        elif kind == FileKind.COMPARISON_DGE:
            dataset.merge_comparison_dge(status.group_id, payload, status.name)
        elif kind in (FileKind.COMPARISON_GO, FileKind.COMPARISON_KEGG):
            dataset.merge_enrichment(status.group_id, kind, payload, status.name)

    dataset.record_status(status)
    return status


def process_upload(
    dataset: ProjectDataset,
    upload: Upload,
    config: Optional[PipelineConfig] = None,
) -> FileStatus:
    """Parse one upload and merge it into ``dataset``. Safe to call from threads."""
    return merge_parsed(dataset, parse_upload(upload, config))


def process_uploads(
    uploads: Iterable[Upload],
    dataset: Optional[ProjectDataset] = None,
    config: Optional[PipelineConfig] = None,
) -> BatchResult:
    """
    Process a batch of uploads into a dataset.

    Args:
        uploads: Uploaded files, in upload order
        dataset: Existing dataset to merge into (a new one if omitted)
        config: Runtime options (defaults if not provided)

    Returns:
        BatchResult with the dataset and one status per upload
    """
    config = config or PipelineConfig()
    dataset = dataset if dataset is not None else ProjectDataset()
    uploads = list(uploads)

    start_time = time.time()
    logger.info("Processing %d files with %d workers", len(uploads), config.max_workers)

    result = BatchResult(dataset=dataset)
    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        parsed_files = executor.map(lambda u: parse_upload(u, config), uploads)
        for parsed in parsed_files:
            status = merge_parsed(dataset, parsed)
            result.statuses.append(status)
            logger.info(
                "%s -> %s%s [%s]",
                status.name,
                status.kind.value,
                f" ({status.group_id})" if status.group_id else "",
                status.status,
            )

    elapsed = time.time() - start_time
    logger.info(
        "Processed %d files in %.2fs: %s",
        len(uploads), elapsed, result.get_stats(),
    )
    return result
