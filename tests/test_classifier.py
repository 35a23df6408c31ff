"""Tests for filename-based file classification."""

import pytest

from rnaseq_deliverables.model import FileKind
from rnaseq_deliverables.parsers.classifier import (
    classify_file,
    classify_kind,
    extract_group_id,
)


class TestExtractGroupId:

    @pytest.mark.parametrize("filename", [
        "Comparison7_results.xlsx",
        "Comparison 7.xlsx",
        "Comp-7_DEG.csv",
        "C7.xlsx",
        "C_7_table.txt",
        "contrast_7.csv",
        "Group7_GO.xlsx",
        "g-7_kegg.csv",
    ])
    def test_group_tokens_normalize_to_c(self, filename):
        """Every supported group token normalizes to C<digits>."""
        assert extract_group_id(filename) == "C7"

    def test_no_group_token(self):
        """Names without a group token yield None."""
        assert extract_group_id("DGE_summary.xlsx") is None
        assert extract_group_id("GO_enrichment.xlsx") is None

    def test_multi_digit(self):
        assert extract_group_id("C12_DEG.xlsx") == "C12"


class TestClassifyKind:

    @pytest.mark.parametrize("filename,expected", [
        ("S1_R1.fastq.gz", FileKind.DELIVERABLE_ONLY),
        ("C1_aligned.bam", FileKind.DELIVERABLE_ONLY),
        ("C1_volcano.png", FileKind.DELIVERABLE_ONLY),
        ("report_template.html", FileKind.TEMPLATE),
        ("novel_isoforms.gtf", FileKind.ANNOTATION_NOVEL),
        ("merged_transcripts.gtf", FileKind.ANNOTATION_MERGED),
        ("STAR_mapping_summary.xlsx", FileKind.MAPPING),
        ("mapping_rate.txt", FileKind.MAPPING),
        ("multiqc_general_stats.txt", FileKind.GLOBAL_STATS),
        ("Raw_data_stat.xlsx", FileKind.GLOBAL_STATS),
        ("DGE_summary.xlsx", FileKind.DGE_SUMMARY),
        ("all_diff_genes.csv", FileKind.DGE_SUMMARY),
        ("C1_GO_enrichment.xlsx", FileKind.COMPARISON_GO),
        ("C1_gene_ontology.csv", FileKind.COMPARISON_GO),
        ("C2_KEGG_pathway.csv", FileKind.COMPARISON_KEGG),
        ("Comp3_DEG_results.xlsx", FileKind.COMPARISON_DGE),
        ("KO_vs_WT.C5.txt", FileKind.COMPARISON_DGE),
        ("C4.xlsx", FileKind.COMPARISON_DGE),
        ("notes.txt", FileKind.DELIVERABLE_ONLY),
        ("readme.md", FileKind.UNKNOWN),
    ])
    def test_classification_table(self, filename, expected):
        assert classify_kind(filename) == expected

    def test_binary_extension_always_wins(self):
        """Binary extensions are deliverable-only whatever the name says."""
        assert classify_kind("C1_DGE_summary_volcano.pdf") == FileKind.DELIVERABLE_ONLY
        assert classify_kind("C1_GO_enrichment.svg") == FileKind.DELIVERABLE_ONLY

    def test_summary_beats_detail(self):
        """A summary keyword routes a DGE file to the overview, not the detail."""
        assert classify_kind("C1_DGE_summary.xlsx") == FileKind.DGE_SUMMARY

    def test_case_insensitive(self):
        assert classify_kind("NOVEL_ISOFORMS.GTF") == FileKind.ANNOTATION_NOVEL
        assert classify_kind("c1_go_ENRICHMENT.XLSX") == FileKind.COMPARISON_GO


class TestClassifyFile:

    def test_attaches_group_id(self):
        classification = classify_file("Comparison2_GO_results.xlsx")
        assert classification.kind == FileKind.COMPARISON_GO
        assert classification.group_id == "C2"

    def test_comparison_kind_without_group(self):
        """Comparison-scoped kinds are still reported when the group id is missing."""
        classification = classify_file("GO_enrichment.xlsx")
        assert classification.kind == FileKind.COMPARISON_GO
        assert classification.group_id is None
        assert classification.kind.is_comparison
