"""
Project-wide dataset assembled from many deliverable files.

Files for the same comparison arrive in any order (an overview table, a
detail table, GO and KEGG exports), so every contribution is merged into
the existing record instead of replacing it. All merge operations hold
the dataset lock, which makes the dataset safe to update from several
worker threads.
"""

import logging
import re
import threading
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from .config import DEFAULT_DESCRIPTION
from .model import (
    ComparisonRecord,
    DGESummaryRow,
    EnrichmentTerm,
    FileKind,
    FileStatus,
    ProjectStats,
    TranscriptSummary,
)
from .parsers.dge_extractor import ComparisonDGE

logger = logging.getLogger(__name__)

_GROUP_DIGITS = re.compile(r"\d+")


def group_sort_key(key: str) -> Tuple[int, int, str]:
    """Natural ordering for group ids: C2 before C10, unnumbered keys last."""
    match = _GROUP_DIGITS.search(key)
    if match:
        return (0, int(match.group(0)), key)
    return (1, 0, key)


def default_name(group_id: str) -> str:
    match = _GROUP_DIGITS.search(group_id)
    return f"Comparison {match.group(0)}" if match else group_id


class ProjectDataset:
    """Merged canonical records for one reporting project."""

    def __init__(self) -> None:
        self._lock = threading.RLock()

        self.data_stats_table: List[List[str]] = []
        self.mapping_stats_table: List[List[str]] = []
        self.transcript_stats: Dict[str, TranscriptSummary] = {}
        self.summary_rows: Dict[str, DGESummaryRow] = {}
        self.comparisons: Dict[str, ComparisonRecord] = {}
        self.project_stats = ProjectStats()
        self.template: Optional[str] = None
        self.files: Dict[str, FileStatus] = {}

        # Which uploaded files contributed to which entity
        self._references: Dict[str, Set[str]] = {}
        self._summary_row_files: Dict[str, str] = {}
        self._table_sources: Dict[str, str] = {}

    # -----------------------------------------------------------------
    # Internal helpers (callers hold the lock)
    # -----------------------------------------------------------------

    def _reference(self, group_id: str, filename: str) -> None:
        self._references.setdefault(group_id, set()).add(filename)

    def _ensure_comparison(self, group_id: str) -> ComparisonRecord:
        record = self.comparisons.get(group_id)
        if record is None:
            description = DEFAULT_DESCRIPTION
            summary_row = self.summary_rows.get(group_id)
            if summary_row is not None and summary_row.description:
                description = summary_row.description
            record = ComparisonRecord(
                id=group_id,
                name=default_name(group_id),
                description=description,
            )
            self.comparisons[group_id] = record
            logger.debug("Created comparison %s", group_id)
        return record

    # -----------------------------------------------------------------
    # Merge operations
    # -----------------------------------------------------------------

    def set_stats_table(self, kind: FileKind, table: List[List[str]], filename: str) -> None:
        """Store a QC (global_stats) or mapping statistics table."""
        with self._lock:
            if kind == FileKind.MAPPING:
                self.mapping_stats_table = table
            else:
                self.data_stats_table = table
            self._table_sources[kind.value] = filename

    def add_transcript_summary(self, kind: FileKind, summary: TranscriptSummary) -> None:
        """Add (or replace, by file name) transcript stats from an annotation file."""
        with self._lock:
            self.transcript_stats[summary.name] = summary
            if kind == FileKind.ANNOTATION_NOVEL:
                self.project_stats.novel_isoforms = summary.count
            else:
                self.project_stats.merged_transcripts = summary.count

    def set_template(self, text: str, filename: str) -> None:
        with self._lock:
            self.template = text
            self._table_sources[FileKind.TEMPLATE.value] = filename

    def merge_dge_summary(self, rows: Iterable[DGESummaryRow], filename: str) -> None:
        """
        Merge overview rows into the summary table and comparison records.

        Counts already computed from a detail file are kept; a summary
        description updates the record's description.
        """
        with self._lock:
            for row in rows:
                key = row.group_id or row.comparison
                existing = self.summary_rows.get(key)
                if existing is not None and existing.source == "detail":
                    existing.comparison = row.comparison
                    if row.description:
                        existing.description = row.description
                else:
                    self.summary_rows[key] = row
                    self._summary_row_files[key] = filename

                if row.group_id is None:
                    continue

                record = self.comparisons.get(row.group_id)
                if record is None:
                    record = self._ensure_comparison(row.group_id)
                    record.sig_count = row.sig_total
                else:
                    if row.description:
                        record.description = row.description
                    if record.stats is None:
                        record.sig_count = row.sig_total
                self._reference(row.group_id, filename)

    def merge_comparison_dge(self, group_id: str, dge: ComparisonDGE, filename: str) -> None:
        """Merge detail-table statistics and plot points; these supersede summary counts."""
        with self._lock:
            record = self._ensure_comparison(group_id)
            record.stats = dge.stats
            record.sig_count = dge.sig_count
            record.volcano_points = list(dge.volcano_points)
            record.ma_points = list(dge.ma_points)

            row = self.summary_rows.get(group_id)
            if row is None:
                row = DGESummaryRow(comparison=group_id, group_id=group_id)
                self.summary_rows[group_id] = row
            row.description = record.description
            row.total = dge.stats.total
            row.down = dge.stats.down
            row.up = dge.stats.up
            row.sig_down = dge.stats.sig_down
            row.sig_up = dge.stats.sig_up
            row.sig_total = dge.stats.sig_total
            row.source = "detail"
            self._summary_row_files[group_id] = filename

            self._reference(group_id, filename)

    def merge_enrichment(
        self,
        group_id: str,
        kind: FileKind,
        terms: List[EnrichmentTerm],
        filename: str,
    ) -> None:
        """Attach GO terms or KEGG pathways to a comparison."""
        with self._lock:
            record = self._ensure_comparison(group_id)
            if kind == FileKind.COMPARISON_KEGG:
                record.kegg_terms = list(terms)
            else:
                record.go_terms = list(terms)
            self._reference(group_id, filename)

    def update_comparison(
        self,
        group_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> ComparisonRecord:
        """Override a comparison's display name or description."""
        with self._lock:
            record = self.comparisons.get(group_id)
            if record is None:
                raise KeyError(f"Unknown comparison: {group_id}")
            if name is not None:
                record.name = name
            if description is not None:
                record.description = description
                row = self.summary_rows.get(group_id)
                if row is not None:
                    row.description = description
            return record

    # -----------------------------------------------------------------
    # File bookkeeping
    # -----------------------------------------------------------------

    def record_status(self, status: FileStatus) -> None:
        with self._lock:
            self.files[status.name] = status

    def remove_file(self, filename: str) -> None:
        """
        Forget an uploaded file.

        Comparisons are deleted once no remaining file references them;
        tables and summaries that came from this file are cleared.
        """
        with self._lock:
            self.files.pop(filename, None)
            self.transcript_stats.pop(filename, None)

            for kind, source in list(self._table_sources.items()):
                if source != filename:
                    continue
                del self._table_sources[kind]
                if kind == FileKind.MAPPING.value:
                    self.mapping_stats_table = []
                elif kind == FileKind.TEMPLATE.value:
                    self.template = None
                else:
                    self.data_stats_table = []

            for key, source in list(self._summary_row_files.items()):
                if source == filename:
                    del self._summary_row_files[key]
                    self.summary_rows.pop(key, None)

            for group_id, sources in list(self._references.items()):
                sources.discard(filename)
                if not sources:
                    del self._references[group_id]
                    self.comparisons.pop(group_id, None)
                    if self.summary_rows.pop(group_id, None) is not None:
                        self._summary_row_files.pop(group_id, None)
                    logger.info("Removed comparison %s (no remaining files)", group_id)

    # -----------------------------------------------------------------
    # Output
    # -----------------------------------------------------------------

    def dge_summary_table(self) -> List[DGESummaryRow]:
        with self._lock:
            keys = sorted(self.summary_rows, key=group_sort_key)
            return [self.summary_rows[k] for k in keys]

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view consumed by report assembly."""
        with self._lock:
            comparison_ids = sorted(self.comparisons, key=group_sort_key)
            return {
                "dataStatsTable": [list(row) for row in self.data_stats_table],
                "mappingStatsTable": [list(row) for row in self.mapping_stats_table],
                "transcriptStats": [s.to_dict() for s in self.transcript_stats.values()],
                "dgeSummaryTable": [row.to_dict() for row in self.dge_summary_table()],
                "comparisons": {
                    group_id: self.comparisons[group_id].to_dict()
                    for group_id in comparison_ids
                },
                "projectStats": self.project_stats.to_dict(),
                "template": self.template,
                "files": [status.to_dict() for status in self.files.values()],
            }
