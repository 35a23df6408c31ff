"""
GTF annotation extractor.

Summarizes a GTF file (merged transcriptome or novel isoforms) into
per-transcript length statistics. Transcript length is the sum of its
exon lengths; GTF coordinates are 1-based and inclusive.
"""

import logging
import math
import re
from typing import Dict

from ..model import TranscriptSummary

logger = logging.getLogger(__name__)

EXON_FEATURE = "exon"
MIN_GTF_FIELDS = 9
TRANSCRIPT_ID_PATTERN = re.compile(r'transcript_id\s+"([^"]+)";')


def collect_transcript_lengths(text: str) -> Dict[str, int]:
    """
    Sum exon lengths per transcript id.

    Comment lines, lines with fewer than nine tab-separated fields, non-exon
    features, lines with non-integer coordinates and exons without a
    ``transcript_id`` attribute are skipped.

    Args:
        text: GTF file contents

    Returns:
        Mapping of transcript id to total exon length, in first-seen order
    """
    lengths: Dict[str, int] = {}
    for line in text.splitlines():
        if not line or line.startswith("#"):
            continue

        parts = line.split("\t")
        if len(parts) < MIN_GTF_FIELDS or parts[2] != EXON_FEATURE:
            continue

        try:
            start = int(parts[3])
            end = int(parts[4])
        except ValueError:
            continue

        match = TRANSCRIPT_ID_PATTERN.search(parts[8])
        if not match:
            continue

        transcript_id = match.group(1)
        lengths[transcript_id] = lengths.get(transcript_id, 0) + (end - start + 1)
    return lengths


def aggregate_transcripts(text: str, name: str) -> TranscriptSummary:
    """
    Build transcript length statistics for one annotation file.

    Args:
        text: GTF file contents
        name: Display name (usually the upload filename)

    Returns:
        TranscriptSummary; all zeros when no transcript was found
    """
    lengths = collect_transcript_lengths(text)
    if not lengths:
        logger.warning("No exon records with transcript_id found in %s", name)
        return TranscriptSummary(name=name)

    count = len(lengths)
    total = sum(lengths.values())
    # Half-up rounding, so 2.5 -> 3
    mean = int(math.floor(total / count + 0.5))
    summary = TranscriptSummary(
        name=name,
        count=count,
        total_length=total,
        mean_length=mean,
        max_length=max(lengths.values()),
    )
    logger.info("%s: %d transcripts, mean length %d", name, count, mean)
    return summary
