#!/usr/bin/env python3
"""
Exemption Classifier
Decides whether an item belongs to a tax-exempt category (books, food, medical products)
by keyword matching against the item name.
"""

import logging
from typing import Iterable, Optional

from .config import DEFAULT_EXEMPT_KEYWORDS

logger = logging.getLogger(__name__)


class ExemptionClassifier:
    """
    Keyword-based exemption classifier.

    A name is exempt when it contains any keyword as a substring. Matching is
    case-sensitive and unanchored, so "chocolates" matches "chocolate".
    Keywords are frozen at construction; instances hold no other state.
    """

    def __init__(self, keywords: Iterable[str] = DEFAULT_EXEMPT_KEYWORDS):
        """
        Initialize classifier with exempt keywords

        Args:
            keywords: Exempt category keywords, checked in order
        """
        self.keywords = tuple(keywords)
        logger.debug(f"ExemptionClassifier initialized with {len(self.keywords)} keywords: {', '.join(self.keywords)}")

    @classmethod
    def from_rule_loader(cls, rule_loader) -> 'ExemptionClassifier':
        """Build a classifier from exempt_keywords in tax_rules.yaml"""
        return cls(rule_loader.get_exempt_keywords())

    def matched_keyword(self, name: str) -> Optional[str]:
        """Return the first keyword found in name, or None"""
        for keyword in self.keywords:
            if keyword in name:
                return keyword
        return None

    def is_exempt(self, name: str) -> bool:
        return self.matched_keyword(name) is not None


DEFAULT_CLASSIFIER = ExemptionClassifier()


def is_exempt(name: str) -> bool:
    """Check a name against the default keywords (book, chocolate, pill)"""
    return DEFAULT_CLASSIFIER.is_exempt(name)
