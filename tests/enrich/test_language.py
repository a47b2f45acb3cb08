"""Tests for vocabulary language detection."""

import random

from enrich.language import detect_language, sample_terms


class TestDetectLanguage:
    """Tests for detect_language."""

    def test_empty_list_is_english(self):
        assert detect_language([]) == "en"

    def test_only_short_terms_is_english(self):
        assert detect_language(["à", "où", "an"]) == "en"

    def test_english_terms(self):
        assert detect_language(["serendipity", "ennui", "quixotic", "ephemeral"]) == "en"

    def test_accents_at_threshold_is_french(self):
        """Three accented terms out of ten is exactly the 30% threshold."""
        terms = ["château", "élève", "forêt"] + ["maison"] * 7
        assert detect_language(terms) == "fr"

    def test_accents_below_threshold_is_english(self):
        terms = ["château", "élève"] + ["maison"] * 8
        assert detect_language(terms) == "en"

    def test_case_and_whitespace_ignored(self):
        assert detect_language(["  ÉLÈVE ", "CHÂTEAU"]) == "fr"

    def test_short_terms_do_not_count(self):
        """Short terms are excluded from the ratio denominator."""
        terms = ["château", "ox", "an", "to", "be", "maison", "arbre"]
        assert detect_language(terms) == "fr"

    def test_large_list_sampled_with_seeded_rng(self):
        """Lists longer than the sample are probabilistic; a seeded generator pins them."""
        terms = ["château"] * 80 + ["ennui"] * 20

        first = detect_language(terms, rng=random.Random(7))
        second = detect_language(terms, rng=random.Random(7))

        assert first == second == "fr"


class TestSampleTerms:
    """Tests for sample_terms."""

    def test_short_list_returned_whole(self):
        assert sample_terms(["a", "b"], sample_size=5) == ["a", "b"]

    def test_long_list_sampled(self):
        terms = [f"term{i}" for i in range(100)]

        sample = sample_terms(terms, sample_size=50, rng=random.Random(1))

        assert len(sample) == 50
        assert set(sample) <= set(terms)
