"""
Filename-based file classification.

Deliverable folders mix raw reads, QC reports, DGE tables, enrichment
exports and annotations, named however each lab's pipeline names them.
The role of a file is decided from its name alone, by an ordered decision
table: rules are evaluated top to bottom and the first match wins.

Reordering rules changes the result for real filenames.
"""

import re
from typing import Callable, Optional, Tuple

from ..model import FileClassification, FileKind

GROUP_ID_PATTERN = re.compile(
    r"(?:Comparison|Comp|C|Contrast|Group|G)\s*[-_]?\s*(\d+)", re.IGNORECASE
)

BINARY_EXTENSIONS: Tuple[str, ...] = (
    # Raw reads
    ".fastq", ".fq", ".fastq.gz", ".fq.gz",
    # Alignments
    ".bam", ".sam", ".bai",
    # Reference sequences
    ".fa", ".fasta", ".fna",
    # Images and documents
    ".pdf", ".png", ".jpg", ".jpeg", ".svg",
)
MARKUP_EXTENSIONS: Tuple[str, ...] = (".html", ".htm")
ANNOTATION_EXTENSIONS: Tuple[str, ...] = (".gtf",)
TABULAR_EXTENSIONS: Tuple[str, ...] = (".txt", ".csv", ".xlsx", ".xls", ".tsv")

ALIGNMENT_KEYWORDS = ("mapping", "align", "star", "bowtie", "hisat")
REPORT_KEYWORDS = ("stat", "summary", "report", "log")
MAPPING_EXTENSIONS = (".txt", ".csv", ".xlsx")
QC_REPORT_KEYWORDS = ("stat", "report", "summary")
QC_DATA_KEYWORDS = ("data", "raw", "seq", "trim", "qc", "qual")
OVERVIEW_KEYWORDS = ("summary", "overview", "all")
DGE_KEYWORDS = ("dge", "diff", "deg")
GO_KEYWORDS = ("enrich", "term", "result", "_go", "go_")
KEGG_KEYWORDS = ("kegg", "pathway")
DGE_DETAIL_KEYWORDS = (
    "dge", "diff", "deg", "result", "comp", "contrast", "vs",
    "change", "fc", "volcano", "ma_plot", "table", "output",
)
# Group-id fallback only considers these endings (no leading dot)
GROUP_FALLBACK_EXTENSIONS = ("xlsx", "csv", "txt", "xls")


def extract_group_id(filename: str) -> Optional[str]:
    """
    Extract a comparison group id from a filename.

    Matches "Comparison 1", "Comp-1", "C1", "C_1", "Contrast 1", "Group 1"
    or "G1" (case-insensitive) and normalizes the result to ``C<digits>``.

    Args:
        filename: Original upload filename

    Returns:
        Group id like "C1", or None when the name carries no group token
    """
    match = GROUP_ID_PATTERN.search(filename)
    if match:
        return f"C{match.group(1)}"
    return None


def _contains_any(name: str, keywords: Tuple[str, ...]) -> bool:
    return any(keyword in name for keyword in keywords)


def _is_binary(name: str, filename: str) -> bool:
    return name.endswith(BINARY_EXTENSIONS)


def _is_template(name: str, filename: str) -> bool:
    return name.endswith(MARKUP_EXTENSIONS)


def _is_novel_annotation(name: str, filename: str) -> bool:
    return name.endswith(ANNOTATION_EXTENSIONS) and ("novel" in name or "isoform" in name)


def _is_annotation(name: str, filename: str) -> bool:
    return name.endswith(ANNOTATION_EXTENSIONS)


def _is_mapping(name: str, filename: str) -> bool:
    return _contains_any(name, ALIGNMENT_KEYWORDS) and (
        _contains_any(name, REPORT_KEYWORDS) or name.endswith(MAPPING_EXTENSIONS)
    )


def _is_global_stats(name: str, filename: str) -> bool:
    return "multiqc" in name or (
        _contains_any(name, QC_REPORT_KEYWORDS) and _contains_any(name, QC_DATA_KEYWORDS)
    )


def _is_dge_summary(name: str, filename: str) -> bool:
    return _contains_any(name, OVERVIEW_KEYWORDS) and _contains_any(name, DGE_KEYWORDS)


def _is_go(name: str, filename: str) -> bool:
    return ("go" in name and _contains_any(name, GO_KEYWORDS)) or "gene_ontology" in name


def _is_kegg(name: str, filename: str) -> bool:
    return _contains_any(name, KEGG_KEYWORDS)


def _is_dge_detail(name: str, filename: str) -> bool:
    return (
        _contains_any(name, DGE_DETAIL_KEYWORDS)
        and "summary" not in name
        and "overview" not in name
    )


def _is_grouped_table(name: str, filename: str) -> bool:
    return extract_group_id(filename) is not None and name.endswith(GROUP_FALLBACK_EXTENSIONS)


def _is_tabular(name: str, filename: str) -> bool:
    return name.endswith(TABULAR_EXTENSIONS)


Rule = Tuple[Callable[[str, str], bool], FileKind]

# Ordered decision table: first matching predicate wins.
CLASSIFICATION_RULES: Tuple[Rule, ...] = (
    (_is_binary, FileKind.DELIVERABLE_ONLY),
    (_is_template, FileKind.TEMPLATE),
    (_is_novel_annotation, FileKind.ANNOTATION_NOVEL),
    (_is_annotation, FileKind.ANNOTATION_MERGED),
    (_is_mapping, FileKind.MAPPING),
    (_is_global_stats, FileKind.GLOBAL_STATS),
    (_is_dge_summary, FileKind.DGE_SUMMARY),
    (_is_go, FileKind.COMPARISON_GO),
    (_is_kegg, FileKind.COMPARISON_KEGG),
    (_is_dge_detail, FileKind.COMPARISON_DGE),
    (_is_grouped_table, FileKind.COMPARISON_DGE),
    (_is_tabular, FileKind.DELIVERABLE_ONLY),
)


def classify_kind(filename: str) -> FileKind:
    """
    Determine the semantic role of a file from its name.

    Args:
        filename: Original upload filename

    Returns:
        The FileKind of the first matching rule, or FileKind.UNKNOWN
    """
    name = filename.lower()
    for predicate, kind in CLASSIFICATION_RULES:
        if predicate(name, filename):
            return kind
    return FileKind.UNKNOWN


def classify_file(filename: str) -> FileClassification:
    """Classify a filename and attach its group id, if any."""
    return FileClassification(kind=classify_kind(filename), group_id=extract_group_id(filename))
