"""
DGE overview and QC statistics table extractors.

The DGE overview lists every comparison with its total / up / down /
significant gene counts. QC and mapping statistics tables are passed
through as text for report assembly.
"""

import logging
import re
from typing import List, Optional

from ..config import DGE_SUMMARY_KEYWORDS
from ..model import DGESummaryRow, RawGrid
from .fields import DGE_SUMMARY_FIELDS
from .tables import cell_text, is_empty_row, normalize_table, to_int

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"\d+")

_COUNT_FIELDS = ("total", "down", "up", "sig_down", "sig_up", "sig_total")


def group_id_from_label(label: str) -> Optional[str]:
    """Map a comparison label ("Comparison 3", "C3: KO vs WT") to ``C3``."""
    match = _DIGITS.search(label)
    if match:
        return f"C{match.group(0)}"
    return None


def extract_dge_summary(grid: RawGrid) -> List[DGESummaryRow]:
    """
    Extract the per-comparison rows of a DGE overview sheet.

    Args:
        grid: Raw sheet rows

    Returns:
        One DGESummaryRow per data row. Missing or non-numeric counts are 0;
        a missing description is None.
    """
    table = normalize_table(grid, DGE_SUMMARY_KEYWORDS, DGE_SUMMARY_FIELDS)

    summary: List[DGESummaryRow] = []
    for row in table.rows:
        comparison = cell_text(row.get("comparison")) or "Unknown"
        description = cell_text(row.get("description")) or None

        counts = {}
        for name in _COUNT_FIELDS:
            value = to_int(row.get(name))
            counts[name] = max(value, 0) if value is not None else 0

        summary.append(DGESummaryRow(
            comparison=comparison,
            description=description,
            group_id=group_id_from_label(comparison),
            source="summary",
            **counts,
        ))

    logger.info("DGE summary: %d comparison rows (columns %s)", len(summary), table.columns)
    return summary


def extract_stats_table(grid: RawGrid) -> List[List[str]]:
    """Return the non-empty rows of a QC / mapping statistics sheet as text."""
    return [[cell_text(cell) for cell in row] for row in grid if row and not is_empty_row(row)]
