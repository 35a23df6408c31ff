"""
Ranked resolution of observed column headers to canonical fields.

Each canonical field declares an ordered list of regex patterns, most
specific first. A field resolves to the first header matching the first
pattern that matches anything. Naming conventions collide ("Down" vs
"Sig Down"), so a field may exclude headers already bound to other
fields; tables are resolved in declaration order, which makes the more
specific fields claim their headers first.
"""

import logging
import re
from dataclasses import dataclass
from typing import Collection, Dict, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CanonicalField:
    """A semantic column with its candidate header patterns.

    Attributes:
        name: Canonical field name used as the key of normalized rows
        patterns: Case-insensitive regexes, most specific first
        fallback_index: Header position used when no pattern matches
            (Python indexing, so ``-1`` is the last column)
        excludes: Fields whose bound headers this field may not select
    """

    name: str
    patterns: Tuple[str, ...]
    fallback_index: Optional[int] = None
    excludes: Tuple[str, ...] = ()


def resolve_position(
    headers: Sequence[str],
    field: CanonicalField,
    claimed: Collection[int] = (),
) -> Optional[int]:
    """
    Resolve one canonical field to a column position.

    Positions keep empty and duplicated headers apart, so a fallback to the
    last column binds that column even when its header is blank.

    Args:
        headers: Observed header strings, in column order
        field: The field to resolve
        claimed: Column positions that may not be selected by pattern matching

    Returns:
        Position of the matching header, the fallback position, or None
    """
    candidates = [
        (position, header)
        for position, header in enumerate(headers)
        if header and position not in claimed
    ]
    for pattern in field.patterns:
        regex = re.compile(pattern, re.IGNORECASE)
        for position, header in candidates:
            if regex.search(header):
                return position

    index = field.fallback_index
    if index is not None and -len(headers) <= index < len(headers):
        return index % len(headers)
    return None


def resolve_field(
    headers: Sequence[str],
    field: CanonicalField,
    claimed: Collection[str] = (),
) -> Optional[str]:
    """Resolve one canonical field to its header string (see ``resolve_position``)."""
    claimed_positions = {i for i, header in enumerate(headers) if header in claimed}
    position = resolve_position(headers, field, claimed_positions)
    return None if position is None else headers[position]


def resolve_positions(
    headers: Sequence[str],
    fields: Sequence[CanonicalField],
) -> Dict[str, int]:
    """
    Resolve a table of canonical fields to column positions, in declaration order.

    Returns:
        Mapping of canonical field name to column position for every
        resolved field. Unresolved fields are absent.
    """
    resolved: Dict[str, int] = {}
    for field in fields:
        claimed = {resolved[name] for name in field.excludes if name in resolved}
        position = resolve_position(headers, field, claimed)
        if position is not None:
            resolved[field.name] = position
    logger.debug("Resolved column positions %s from headers %s", resolved, list(headers))
    return resolved


def resolve_fields(
    headers: Sequence[str],
    fields: Sequence[CanonicalField],
) -> Dict[str, str]:
    """Resolve a table of canonical fields to header strings."""
    return {
        name: headers[position]
        for name, position in resolve_positions(headers, fields).items()
    }


# =============================================================================
# Field tables
# =============================================================================

DGE_DETAIL_FIELDS: Tuple[CanonicalField, ...] = (
    CanonicalField("log_fc", (r"log2?fc|foldchange|log2_fold_change",), fallback_index=1),
    CanonicalField("fdr", (r"fdr|padj|adj\.?p|q_?value",), fallback_index=-1),
    CanonicalField("expression", (r"logcpm|log2?cpm|cpm", r"basemean|aveexpr")),
    CanonicalField(
        "identifier",
        (r"gene|transcript|id|symbol|name|target_id",),
        fallback_index=0,
    ),
)

DGE_SUMMARY_FIELDS: Tuple[CanonicalField, ...] = (
    CanonicalField("comparison", (r"comp",), fallback_index=0),
    CanonicalField("description", (r"desc",)),
    CanonicalField("total", (r"total.*deg|total.*gene", r"^total$")),
    CanonicalField("sig_down", (r"sig.*down", r"down.*sig")),
    CanonicalField("sig_up", (r"sig.*up", r"up.*sig")),
    CanonicalField(
        "sig_total",
        (r"total.*sig", r"^sig", r"#.*sig"),
        excludes=("sig_down", "sig_up"),
    ),
    CanonicalField("down", (r"^down",), excludes=("sig_down",)),
    CanonicalField("up", (r"^up",), excludes=("sig_up",)),
)

ENRICHMENT_FIELDS: Tuple[CanonicalField, ...] = (
    CanonicalField(
        "term",
        (r"description", r"term", r"pathway", r"id"),
        fallback_index=0,
    ),
    CanonicalField(
        "count",
        (r"^count$", r"significant", r"^n$", r"gene_?count"),
        excludes=("term",),
    ),
    CanonicalField(
        "category",
        (r"ontology|category|namespace|type",),
        excludes=("term",),
    ),
    CanonicalField(
        "adjusted_p_value",
        (r"p[-_.]?adj|fdr|q[-_.]?val", r"p[-_.]?val"),
        excludes=("term",),
    ),
)
