from io import BytesIO
from typing import Callable, List, Sequence

import pandas as pd
import pytest


def _workbook_bytes(rows: Sequence[Sequence]) -> bytes:
    raw = pd.DataFrame([list(row) for row in rows])
    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        raw.to_excel(writer, index=False, header=False)
    return buffer.getvalue()


def _csv_bytes(rows: Sequence[Sequence], sep: str = ",") -> bytes:
    lines: List[str] = []
    for row in rows:
        lines.append(sep.join("" if cell is None else str(cell) for cell in row))
    return ("\n".join(lines) + "\n").encode("utf-8")


@pytest.fixture()
def make_workbook() -> Callable[[Sequence[Sequence]], bytes]:
    """Build an in-memory .xlsx workbook from a list of rows."""
    return _workbook_bytes


@pytest.fixture()
def make_csv() -> Callable[..., bytes]:
    """Build delimited text bytes from a list of rows."""
    return _csv_bytes


@pytest.fixture()
def dge_summary_rows() -> List[list]:
    """A DGE overview sheet with a title row above the header."""
    return [
        ["Differential expression overview", None, None, None, None, None, None, None],
        ["Comparison", "Description", "Total DEGs", "Up", "Down", "Sig Up", "Sig Down", "Sig Total"],
        ["Comparison 1", "KO vs WT", 1000, 600, 400, 40, 30, 70],
        ["Comparison 2", "Treated vs Untreated", 900, 450, 450, 12, 8, 20],
    ]


@pytest.fixture()
def dge_detail_rows() -> List[list]:
    """A DGE detail sheet (edgeR-like) with a title row."""
    return [
        ["C1: KO vs WT", None, None, None, None],
        ["GeneID", "logFC", "logCPM", "PValue", "FDR"],
        ["GENE1", 2.5, 6.1, 0.0001, 0.001],
        ["GENE2", -1.8, 4.2, 0.0005, 0.004],
        ["GENE3", 0.4, 7.0, 0.3, 0.6],
        ["GENE4", -0.2, 3.3, 0.5, 0.8],
        ["GENE5", "NA", 2.0, 0.9, "NA"],
    ]


@pytest.fixture()
def go_rows() -> List[list]:
    """A clusterProfiler-style GO enrichment export."""
    return [
        ["ONTOLOGY", "ID", "Description", "GeneRatio", "p.adjust", "Count"],
        ["BP", "GO:0006955", "immune response", "12/200", 0.0001, 12],
        ["BP", "GO:0006954", "inflammatory response", "30/200", 0.001, 30],
        ["MF", "GO:0005125", "cytokine activity", "8/200", 0.01, 8],
    ]
