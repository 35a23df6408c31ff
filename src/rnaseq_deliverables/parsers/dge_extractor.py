"""
Differential expression extractor.

Turns one comparison's DGE detail table (DESeq2, edgeR, limma, ... exports
with arbitrary column naming) into comparison statistics and bounded
volcano/MA point sets.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import numpy as np
import pandas as pd

from ..config import (
    DGE_DETAIL_KEYWORDS,
    FDR_THRESHOLD,
    LOG_FC_THRESHOLD,
    NEG_LOG_FDR_CAP,
    POINT_PRECISION,
    SIG_LIMIT,
    TOTAL_LIMIT,
    UNKNOWN_LABEL,
)
from ..model import CanonicalRow, ComparisonStats, DEPoint, RawGrid, ScatterPoint
from .downsampler import downsample
from .fields import DGE_DETAIL_FIELDS
from .tables import cell_text, normalize_table, to_float

logger = logging.getLogger(__name__)


@dataclass
class DGEResult:
    """Statistics plus the full, not yet downsampled, point sets."""

    stats: ComparisonStats
    significant: List[DEPoint] = field(default_factory=list)
    non_significant: List[DEPoint] = field(default_factory=list)


@dataclass
class ComparisonDGE:
    """Everything a DGE detail file contributes to its comparison."""

    stats: ComparisonStats
    volcano_points: List[ScatterPoint] = field(default_factory=list)
    ma_points: List[ScatterPoint] = field(default_factory=list)
    columns: Dict[str, str] = field(default_factory=dict)

    @property
    def sig_count(self) -> int:
        return self.stats.sig_total


def _parse_rows(rows: Sequence[CanonicalRow]) -> pd.DataFrame:
    records = []
    for row in rows:
        log_fc = to_float(row.get("log_fc"))
        fdr = to_float(row.get("fdr"))
        if log_fc is None or fdr is None or fdr < 0:
            continue
        expression = to_float(row.get("expression"))
        label = cell_text(row.get("identifier")) or UNKNOWN_LABEL
        records.append({
            "log_fc": log_fc,
            "fdr": fdr,
            "expression": float("nan") if expression is None else expression,
            "label": label,
        })
    return pd.DataFrame.from_records(
        records, columns=["log_fc", "fdr", "expression", "label"]
    )


def summarize_dge(rows: Sequence[CanonicalRow]) -> DGEResult:
    """
    Compute comparison statistics and scatter points from normalized rows.

    Rows whose fold change or FDR is not numeric, or whose FDR is negative,
    are excluded entirely.
    A row is significant when ``FDR < 0.05`` and ``|logFC| > 1``.
    ``-log10(FDR)`` is capped at 50, and ``FDR == 0`` maps to the cap.

    Args:
        rows: Rows keyed by ``log_fc``, ``fdr`` and optionally
            ``expression`` and ``identifier``

    Returns:
        DGEResult with counts and the significant / non-significant points
    """
    df = _parse_rows(rows)
    if df.empty:
        return DGEResult(stats=ComparisonStats())

    log_fc = df["log_fc"].astype(float)
    fdr = df["fdr"].astype(float)

    positive_fdr = fdr > 0
    neg_log_fdr = -np.log10(fdr.where(positive_fdr, 1.0))
    neg_log_fdr = neg_log_fdr.clip(upper=NEG_LOG_FDR_CAP).where(positive_fdr, NEG_LOG_FDR_CAP)

    significant = (fdr < FDR_THRESHOLD) & (log_fc.abs() > LOG_FC_THRESHOLD)
    up = log_fc > 0
    down = log_fc < 0

    stats = ComparisonStats(
        total=len(df),
        up=int(up.sum()),
        down=int(down.sum()),
        sig_up=int((significant & up).sum()),
        sig_down=int((significant & down).sum()),
    )
    stats.sig_total = stats.sig_up + stats.sig_down

    ma_x = df["expression"].astype(float).fillna(log_fc)

    result = DGEResult(stats=stats)
    for fc, strength, expression, is_sig, label in zip(
        log_fc, neg_log_fdr, ma_x, significant, df["label"]
    ):
        point = DEPoint(
            log_fc=float(fc),
            neg_log_fdr=float(strength),
            expression=float(expression),
            significant=bool(is_sig),
            label=str(label),
        )
        if point.significant:
            result.significant.append(point)
        else:
            result.non_significant.append(point)

    skipped = len(rows) - stats.total
    if skipped:
        logger.debug("Skipped %d rows with non-numeric fold change or invalid FDR", skipped)
    return result


def extract_comparison_dge(
    grid: RawGrid,
    sig_limit: int = SIG_LIMIT,
    total_limit: int = TOTAL_LIMIT,
) -> ComparisonDGE:
    """
    Extract statistics and plot points from a DGE detail sheet.

    Args:
        grid: Raw sheet rows
        sig_limit: Maximum significant points kept for plotting
        total_limit: Maximum points kept for plotting

    Returns:
        ComparisonDGE with stats and downsampled volcano / MA points
    """
    table = normalize_table(grid, DGE_DETAIL_KEYWORDS, DGE_DETAIL_FIELDS)
    if not table.rows:
        return ComparisonDGE(stats=ComparisonStats(), columns=table.columns)

    result = summarize_dge(table.rows)
    points = downsample(result.significant, result.non_significant, sig_limit, total_limit)

    logger.info(
        "DGE table: %d genes, %d significant (%d up, %d down), %d points kept",
        result.stats.total,
        result.stats.sig_total,
        result.stats.sig_up,
        result.stats.sig_down,
        len(points),
    )
    return ComparisonDGE(
        stats=result.stats,
        volcano_points=[p.volcano(POINT_PRECISION) for p in points],
        ma_points=[p.ma(POINT_PRECISION) for p in points],
        columns=table.columns,
    )
