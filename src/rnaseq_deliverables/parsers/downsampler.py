"""
Significance-preserving downsampling of scatter points.

Volcano and MA plots of a full DGE table can hold tens of thousands of
points. Significant points are kept preferentially (the most extreme
hits first when there are too many); the remaining capacity is filled by
uniform stride sampling of non-significant points so the overall shape
of the distribution survives.
"""

from typing import List, Sequence

from ..config import SIG_LIMIT, TOTAL_LIMIT
from ..model import DEPoint


def downsample(
    significant: Sequence[DEPoint],
    non_significant: Sequence[DEPoint],
    sig_limit: int = SIG_LIMIT,
    total_limit: int = TOTAL_LIMIT,
) -> List[DEPoint]:
    """
    Bound the number of plotted points.

    Args:
        significant: Significant points in input order
        non_significant: Non-significant points in input order
        sig_limit: Maximum number of significant points kept
        total_limit: Maximum number of points returned

    Returns:
        Kept significant points followed by strided non-significant points.
        Deterministic for a given input order.
    """
    if len(significant) <= sig_limit:
        kept = list(significant)
    else:
        # sorted() is stable, so ties keep their input order
        ranked = sorted(significant, key=lambda p: p.neg_log_fdr, reverse=True)
        kept = ranked[:sig_limit]

    remaining = total_limit - len(kept)
    if remaining <= 0 or not non_significant:
        return kept[:total_limit]

    stride = max(1, len(non_significant) // remaining)
    for index in range(0, len(non_significant), stride):
        if len(kept) >= total_limit:
            break
        kept.append(non_significant[index])
    return kept
