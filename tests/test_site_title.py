"""Tests for hostname to site title conversion."""

import pytest

from sitegen.services.site_title import (
    extract_site_title,
    greedy_segment,
    split_boundaries,
    strip_tld,
    word_break,
)


class TestExtractSiteTitle:
    @pytest.mark.parametrize(
        "hostname, expected",
        [
            ("bestlawyers.com", "Best Lawyers"),
            ("my-seo-tools.co.uk", "My SEO Tools"),
            ("BestLawyers.com", "Best Lawyers"),
            ("www.pet_insurance.net", "Pet Insurance"),
            ("tips-for-dogs.com", "Tips for Dogs"),
            ("the-dog-guide.org", "The Dog Guide"),
            ("bestlawyersnearme.co.uk", "Best Lawyers Near Me"),
        ],
    )
    def test_examples(self, hostname, expected):
        assert extract_site_title(hostname) == expected

    def test_already_spaced_title_is_stable(self):
        assert extract_site_title("Best Lawyers") == "Best Lawyers"

    def test_digits_split(self):
        assert extract_site_title("top10guide.com") == "Top 10 Guide"

    def test_unknown_letters_still_give_a_title(self):
        assert extract_site_title("xqzv.com") == "Xqzv"

    def test_never_empty_for_non_empty_input(self):
        assert extract_site_title("---.com") == "---.com"


class TestStripTld:
    def test_plain_tld(self):
        assert strip_tld("example.com") == "example"

    def test_compound_tld_and_www(self):
        assert strip_tld("www.example.co.uk") == "example"

    def test_no_dot(self):
        assert strip_tld("localhost") == "localhost"


class TestSplitBoundaries:
    def test_camel_case(self):
        assert split_boundaries("solarPanelHub") == "solar Panel Hub"

    def test_letter_digit(self):
        assert split_boundaries("abc123def") == "abc 123 def"


class TestWordBreak:
    def test_fewest_words_win(self):
        words = frozenset({"a", "b", "c", "ab", "abc"})
        assert word_break("abc", words) == ["abc"]

    def test_ties_keep_first_found(self):
        words = frozenset({"a", "ab", "bc", "c"})
        assert word_break("abc", words) == ["a", "bc"]

    def test_keeps_original_case(self):
        assert word_break("CarCare", frozenset({"car", "care"})) == ["Car", "Care"]

    def test_no_segmentation(self):
        assert word_break("xyz", frozenset({"abc"})) is None


class TestGreedySegment:
    def test_unmatched_tail_opens_new_token(self):
        assert greedy_segment("housexy", frozenset({"house"})) == ["house", "xy"]

    def test_short_token_absorbs_unmatched(self):
        assert greedy_segment("catxyz", frozenset({"cat"})) == ["catxyz"]

    def test_all_unmatched(self):
        assert greedy_segment("qqq", frozenset({"cat"})) == ["qqq"]
