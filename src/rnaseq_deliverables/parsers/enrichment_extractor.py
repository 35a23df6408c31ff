"""
GO / KEGG enrichment extractor.

Normalizes enrichment exports (clusterProfiler, topGO, DAVID, KOBAS, ...)
into canonical term records. Extraction keeps source order; ranking is
left to the caller via ``rank_terms``.
"""

import logging
from typing import List, Optional, Sequence

from ..config import ENRICHMENT_KEYWORDS, ENRICHMENT_TERM_CAP, UNKNOWN_LABEL
from ..model import EnrichmentTerm, RawGrid
from .fields import ENRICHMENT_FIELDS
from .tables import cell_text, normalize_table, to_float, to_int

logger = logging.getLogger(__name__)


def extract_enrichment(grid: RawGrid, limit: int = ENRICHMENT_TERM_CAP) -> List[EnrichmentTerm]:
    """
    Extract enrichment terms from a GO or KEGG sheet.

    Column priority for the term is description > term > pathway > id >
    first column; for the count it is "count" > "significant" > "n" >
    "gene_count". Non-numeric counts become 0 and non-numeric p-values 0.0.

    Args:
        grid: Raw sheet rows
        limit: Maximum number of terms returned

    Returns:
        Up to ``limit`` EnrichmentTerm records in source order
    """
    table = normalize_table(grid, ENRICHMENT_KEYWORDS, ENRICHMENT_FIELDS)
    has_category = "category" in table.columns

    terms: List[EnrichmentTerm] = []
    for row in table.rows[:limit]:
        term = cell_text(row.get("term")) or UNKNOWN_LABEL

        count = to_int(row.get("count"))
        p_adjust = to_float(row.get("adjusted_p_value"))

        category: Optional[str] = None
        if has_category and row.get("category") is not None:
            category = cell_text(row.get("category"))

        terms.append(EnrichmentTerm(
            term=term,
            count=max(count, 0) if count is not None else 0,
            adjusted_p_value=p_adjust if p_adjust is not None else 0.0,
            category=category,
        ))

    logger.debug("Extracted %d enrichment terms using columns %s", len(terms), table.columns)
    return terms


def rank_terms(terms: Sequence[EnrichmentTerm], limit: Optional[int] = None) -> List[EnrichmentTerm]:
    """Order terms by descending gene count (stable), optionally truncated."""
    ranked = sorted(terms, key=lambda t: t.count, reverse=True)
    return ranked if limit is None else ranked[:limit]
