"""Canonical records produced from deliverable files.

These dataclasses are the plain-data contract between the parsers and
report assembly. ``to_dict()`` methods emit the camelCase keys that
report templates consume.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

Cell = Union[str, int, float, None]
RawGrid = List[List[Cell]]
CanonicalRow = Dict[str, Cell]


class FileKind(str, Enum):
    """Semantic role of an uploaded file, derived from its name."""

    GLOBAL_STATS = "global_stats"
    MAPPING = "mapping"
    DGE_SUMMARY = "dge_summary"
    COMPARISON_DGE = "comparison_dge"
    COMPARISON_GO = "comparison_go"
    COMPARISON_KEGG = "comparison_kegg"
    TEMPLATE = "template"
    ANNOTATION_NOVEL = "annotation_novel"
    ANNOTATION_MERGED = "annotation_merged"
    DELIVERABLE_ONLY = "deliverable_only"
    UNKNOWN = "unknown"

    @property
    def is_comparison(self) -> bool:
        return self.value.startswith("comparison_")

    @property
    def is_annotation(self) -> bool:
        return self.value.startswith("annotation_")


@dataclass(frozen=True)
class FileClassification:
    kind: FileKind
    group_id: Optional[str] = None


@dataclass(frozen=True)
class HeaderMatch:
    """Location of the header row within a raw grid."""

    row_index: int
    headers: List[str] = field(default_factory=list)


@dataclass
class ComparisonStats:
    total: int = 0
    up: int = 0
    down: int = 0
    sig_up: int = 0
    sig_down: int = 0
    sig_total: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "up": self.up,
            "down": self.down,
            "sigUp": self.sig_up,
            "sigDown": self.sig_down,
            "sigTotal": self.sig_total,
        }


@dataclass(frozen=True)
class ScatterPoint:
    x: float
    y: float
    significant: bool
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "sig": self.significant, "label": self.label}


@dataclass(frozen=True)
class DEPoint:
    """One parseable differential-expression row.

    Volcano and MA points are two projections of the same row, so the
    downsampler works on ``DEPoint`` and projection happens afterwards.
    """

    log_fc: float
    neg_log_fdr: float
    expression: float
    significant: bool
    label: str

    def volcano(self, precision: int = 3) -> ScatterPoint:
        return ScatterPoint(
            x=round(self.log_fc, precision),
            y=round(self.neg_log_fdr, precision),
            significant=self.significant,
            label=self.label,
        )

    def ma(self, precision: int = 3) -> ScatterPoint:
        return ScatterPoint(
            x=round(self.expression, precision),
            y=round(self.log_fc, precision),
            significant=self.significant,
            label=self.label,
        )


@dataclass
class TranscriptSummary:
    """Per-file transcript length statistics from a GTF annotation."""

    name: str
    count: int = 0
    total_length: int = 0
    mean_length: int = 0
    max_length: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "count": self.count,
            "totalLen": self.total_length,
            "meanLen": self.mean_length,
            "maxLen": self.max_length,
        }


@dataclass(frozen=True)
class EnrichmentTerm:
    """A GO term or KEGG pathway row from an enrichment export."""

    term: str
    count: int = 0
    adjusted_p_value: float = 0.0
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "term": self.term,
            "count": self.count,
            "pAdjust": self.adjusted_p_value,
        }
        if self.category is not None:
            payload["category"] = self.category
        return payload


@dataclass
class DGESummaryRow:
    """One comparison row of the DGE overview table.

    ``source`` records whether the numbers came from an overview file
    ("summary") or were computed from a detail file ("detail"); detail
    numbers are never overwritten by summary numbers.
    """

    comparison: str
    description: Optional[str] = None
    total: int = 0
    down: int = 0
    up: int = 0
    sig_down: int = 0
    sig_up: int = 0
    sig_total: int = 0
    group_id: Optional[str] = None
    source: str = "summary"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "comp": self.comparison,
            "desc": self.description,
            "total": self.total,
            "downTotal": self.down,
            "upTotal": self.up,
            "sigDown": self.sig_down,
            "sigUp": self.sig_up,
            "sig": self.sig_total,
        }


@dataclass
class ComparisonRecord:
    """Everything known about one biological comparison (e.g. ``C1``)."""

    id: str
    name: str
    description: str
    sig_count: int = 0
    stats: Optional[ComparisonStats] = None
    volcano_points: List[ScatterPoint] = field(default_factory=list)
    ma_points: List[ScatterPoint] = field(default_factory=list)
    go_terms: List[EnrichmentTerm] = field(default_factory=list)
    kegg_terms: List[EnrichmentTerm] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "sigCount": self.sig_count,
            "maPoints": [p.to_dict() for p in self.ma_points],
            "volcanoPoints": [p.to_dict() for p in self.volcano_points],
            "goTerms": [t.to_dict() for t in self.go_terms],
            "keggPathways": [t.to_dict() for t in self.kegg_terms],
        }
        if self.stats is not None:
            payload["stats"] = self.stats.to_dict()
        return payload


@dataclass
class ProjectStats:
    """Project-level counters filled from annotation files."""

    merged_transcripts: Optional[int] = None
    novel_isoforms: Optional[int] = None

    def to_dict(self) -> Dict[str, Optional[int]]:
        return {
            "mergedTranscripts": self.merged_transcripts,
            "novelIsoforms": self.novel_isoforms,
        }


@dataclass
class FileStatus:
    """Processing outcome for one uploaded file."""

    name: str
    kind: FileKind
    group_id: Optional[str] = None
    status: str = "pending"  # "pending" | "success" | "warning" | "error"
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in ("success", "warning")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.kind.value,
            "assignedTo": self.group_id,
            "status": self.status,
            "message": self.message,
        }
