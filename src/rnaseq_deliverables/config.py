"""Fixed thresholds, keyword sets and runtime configuration.

Significance thresholds, plot bounds and header keywords are module
constants shared by every parser. Runtime knobs (worker count, text
encoding) live in ``PipelineConfig``.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

# =============================================================================
# Significance and plotting thresholds
# =============================================================================

FDR_THRESHOLD = 0.05
LOG_FC_THRESHOLD = 1.0

# -log10(FDR) is capped so a handful of FDR == 0 rows cannot squash a plot
NEG_LOG_FDR_CAP = 50.0

SIG_LIMIT = 3000
TOTAL_LIMIT = 5000

HEADER_SCAN_ROWS = 20
ENRICHMENT_TERM_CAP = 50

POINT_PRECISION = 3

DEFAULT_DESCRIPTION = "Test vs Control"
UNKNOWN_LABEL = "Unknown"

# =============================================================================
# Header keyword sets
# =============================================================================

DGE_DETAIL_KEYWORDS: Tuple[str, ...] = ("logfc", "fdr", "pvalue", "padj", "foldchange")

DGE_SUMMARY_KEYWORDS: Tuple[str, ...] = (
    "comparison", "total", "up", "down", "sig", "regulated",
)

# "n" resolves the count column but is not a header discovery keyword.
ENRICHMENT_KEYWORDS: Tuple[str, ...] = (
    "term", "description", "pathway", "id",
    "count", "significant",
    "pvalue", "p-value", "p.adjust", "fdr", "qvalue", "q-value",
)

# =============================================================================
# Runtime configuration
# =============================================================================

ENV_MAX_WORKERS = "RNASEQ_DELIVERABLES_MAX_WORKERS"
ENV_ENCODING = "RNASEQ_DELIVERABLES_ENCODING"

DEFAULT_MAX_WORKERS = 4
DEFAULT_ENCODING = "utf-8"


@dataclass
class PipelineConfig:
    """Runtime options for batch processing."""

    max_workers: int = DEFAULT_MAX_WORKERS
    text_encoding: str = DEFAULT_ENCODING

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "PipelineConfig":
        """Build a config from environment variables, falling back to defaults."""
        env_map = os.environ if env is None else env

        max_workers = DEFAULT_MAX_WORKERS
        raw_workers = env_map.get(ENV_MAX_WORKERS)
        if raw_workers:
            try:
                max_workers = int(raw_workers)
            except ValueError:
                logger.warning(
                    "Invalid %s=%r, using %d", ENV_MAX_WORKERS, raw_workers, DEFAULT_MAX_WORKERS
                )
            else:
                if max_workers < 1:
                    logger.warning(
                        "%s must be >= 1, using %d", ENV_MAX_WORKERS, DEFAULT_MAX_WORKERS
                    )
                    max_workers = DEFAULT_MAX_WORKERS

        encoding = env_map.get(ENV_ENCODING) or DEFAULT_ENCODING
        return cls(max_workers=max_workers, text_encoding=encoding)
