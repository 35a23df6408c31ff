"""Tests for GO / KEGG enrichment extraction."""

from rnaseq_deliverables.model import EnrichmentTerm
from rnaseq_deliverables.parsers.enrichment_extractor import extract_enrichment, rank_terms


class TestExtractEnrichment:

    def test_clusterprofiler_export(self, go_rows):
        terms = extract_enrichment(go_rows)

        assert [t.term for t in terms] == [
            "immune response",
            "inflammatory response",
            "cytokine activity",
        ]
        assert terms[0].count == 12
        assert terms[0].adjusted_p_value == 0.0001
        assert terms[0].category == "BP"
        assert terms[2].category == "MF"

    def test_source_order_kept(self, go_rows):
        """Extraction does not re-rank terms."""
        terms = extract_enrichment(go_rows)
        assert [t.count for t in terms] == [12, 30, 8]

    def test_title_row_and_kegg_columns(self):
        grid = [
            ["KEGG enrichment for C1"],
            [None],
            ["Pathway", "n", "pvalue"],
            ["Cytokine-cytokine receptor interaction", 15, 0.002],
            ["JAK-STAT signaling pathway", 9, 0.01],
        ]
        terms = extract_enrichment(grid)
        assert len(terms) == 2
        assert terms[0].term == "Cytokine-cytokine receptor interaction"
        assert terms[0].count == 15
        assert terms[0].adjusted_p_value == 0.002
        assert terms[0].category is None

    def test_non_numeric_values_default_to_zero(self):
        grid = [
            ["Term", "Count", "FDR"],
            [None, "many", "<0.001 (n.s.)"],
            ["apoptosis", "7", "NA"],
        ]
        terms = extract_enrichment(grid)
        assert terms[0].term == "Unknown"
        assert terms[0].count == 0
        assert terms[1].count == 7
        assert terms[1].adjusted_p_value == 0.0

    def test_capped_at_fifty(self):
        grid = [["Term", "Count", "FDR"]] + [[f"term {i}", i, 0.01] for i in range(80)]
        terms = extract_enrichment(grid)
        assert len(terms) == 50
        assert terms[-1].term == "term 49"

    def test_empty_sheet(self):
        assert extract_enrichment([]) == []

    def test_to_dict_omits_missing_category(self):
        payload = EnrichmentTerm(term="x", count=3, adjusted_p_value=0.01).to_dict()
        assert payload == {"term": "x", "count": 3, "pAdjust": 0.01}


class TestRankTerms:

    def test_descending_by_count_stable(self):
        terms = [
            EnrichmentTerm(term="a", count=5),
            EnrichmentTerm(term="b", count=9),
            EnrichmentTerm(term="c", count=5),
        ]
        assert [t.term for t in rank_terms(terms)] == ["b", "a", "c"]

    def test_limit(self):
        terms = [EnrichmentTerm(term=str(i), count=i) for i in range(10)]
        assert [t.count for t in rank_terms(terms, limit=3)] == [9, 8, 7]
