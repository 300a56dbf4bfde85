#!/usr/bin/env python3
"""
Unit tests for exempt category detection
"""
from salestax.config import DEFAULT_TAX_RULES
from salestax.exemption_classifier import ExemptionClassifier, is_exempt


class TestExemptionClassifier:
    """Test keyword matching against item names"""

    def test_exempt_categories(self):
        assert is_exempt('book')
        assert is_exempt('chocolate bar')
        assert is_exempt('packet of headache pills')

    def test_non_exempt_items(self):
        assert not is_exempt('music CD')
        assert not is_exempt('bottle of perfume')

    def test_substring_match_inside_word(self):
        """Matching is unanchored: 'chocolates' and 'bookend' both match"""
        assert is_exempt('imported box of chocolates')
        assert is_exempt('bookend')

    def test_case_sensitive(self):
        assert not is_exempt('Book')
        assert not is_exempt('CHOCOLATE')

    def test_first_match_wins(self):
        classifier = ExemptionClassifier(['pill', 'book'])
        assert classifier.matched_keyword('book of pills') == 'pill'
        assert classifier.matched_keyword('music CD') is None

    def test_custom_keywords(self):
        classifier = ExemptionClassifier(['bread'])
        assert classifier.is_exempt('loaf of bread')
        assert not classifier.is_exempt('book')

    def test_keywords_are_frozen(self):
        keywords = ['book']
        classifier = ExemptionClassifier(keywords)
        keywords.append('perfume')
        assert classifier.keywords == ('book',)
        assert not classifier.is_exempt('perfume')

    def test_default_keywords_unaffected_by_rule_dict(self):
        keywords = DEFAULT_TAX_RULES['exempt_keywords']
        keywords.append('perfume')
        try:
            classifier = ExemptionClassifier()
        finally:
            keywords.remove('perfume')
        assert classifier.keywords == ('book', 'chocolate', 'pill')
        assert not classifier.is_exempt('bottle of perfume')
