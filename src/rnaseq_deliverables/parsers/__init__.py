"""Parsers for RNA-seq deliverable files.

Classifies uploads by filename and extracts canonical records from DGE
tables, DGE overviews, enrichment exports, QC tables and GTF annotations.
"""

from .classifier import classify_file, classify_kind, extract_group_id
from .dge_extractor import ComparisonDGE, extract_comparison_dge, summarize_dge
from .downsampler import downsample
from .enrichment_extractor import extract_enrichment, rank_terms
from .fields import CanonicalField, resolve_field, resolve_fields, resolve_positions
from .gtf_extractor import aggregate_transcripts
from .summary_extractor import extract_dge_summary, extract_stats_table
from .tables import locate_header, normalize_table, read_grid

__all__ = [
    "classify_file",
    "classify_kind",
    "extract_group_id",
    "ComparisonDGE",
    "extract_comparison_dge",
    "summarize_dge",
    "downsample",
    "extract_enrichment",
    "rank_terms",
    "CanonicalField",
    "resolve_field",
    "resolve_fields",
    "resolve_positions",
    "aggregate_transcripts",
    "extract_dge_summary",
    "extract_stats_table",
    "locate_header",
    "normalize_table",
    "read_grid",
]
