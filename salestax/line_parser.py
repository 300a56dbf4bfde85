#!/usr/bin/env python3
"""
Line Parser - Convert free-text purchase lines into LineItems

Expected line format:

    <quantity> <name...> at <price>
    e.g. "1 imported box of chocolates at 10.00"

Lines that do not fit the format are dropped without raising or logging:
the result only contains the lines that parsed, in input order.
"""

import logging
import re
from decimal import Decimal
from typing import Iterable, List, Optional

from .config import DEFAULT_TAX_RULES
from .exemption_classifier import DEFAULT_CLASSIFIER, ExemptionClassifier
from .models import LineItem
from .tax_calculator import DEFAULT_CALCULATOR, TaxCalculator

logger = logging.getLogger(__name__)

# Quantity: digits with optional leading "+" (C-style "2", "+2")
QUANTITY_PATTERN = re.compile(r'^\+?[0-9]+$')
# Price: plain decimal, no exponent / thousands separator / NaN
PRICE_PATTERN = re.compile(r'^\+?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)$')


def parse_quantity(token: str) -> Optional[int]:
    """Parse a quantity token; None unless it is an integer >= 1"""
    if not QUANTITY_PATTERN.match(token):
        return None
    quantity = int(token)
    return quantity if quantity >= 1 else None


def parse_price(text: str) -> Optional[Decimal]:
    """Parse a non-negative decimal price; None if the text is not one"""
    text = text.strip()
    if not PRICE_PATTERN.match(text):
        return None
    return Decimal(text)


class LineParser:
    """Parse purchase lines using the line grammar from tax_rules.yaml"""

    def __init__(self, classifier: Optional[ExemptionClassifier] = None,
                 calculator: Optional[TaxCalculator] = None,
                 line_separator: str = DEFAULT_TAX_RULES['parsing']['line_separator'],
                 import_marker: str = DEFAULT_TAX_RULES['parsing']['import_marker']):
        """
        Initialize line parser

        Args:
            classifier: Exemption classifier (default keywords if None)
            calculator: Tax calculator used to derive taxed prices (default rates if None)
            line_separator: Literal text between name and price
            import_marker: Substring of the name that marks an imported item
        """
        self.classifier = classifier or DEFAULT_CLASSIFIER
        self.calculator = calculator or DEFAULT_CALCULATOR
        self.line_separator = line_separator
        self.import_marker = import_marker

    @classmethod
    def from_rule_loader(cls, rule_loader) -> 'LineParser':
        """Build a parser, classifier and calculator from tax_rules.yaml"""
        parsing = rule_loader.get_parsing_rules()
        logger.debug(
            f"Line grammar: separator={parsing['line_separator']!r} "
            f"import marker={parsing['import_marker']!r}"
        )
        return cls(
            classifier=ExemptionClassifier.from_rule_loader(rule_loader),
            calculator=TaxCalculator.from_rule_loader(rule_loader),
            line_separator=parsing['line_separator'],
            import_marker=parsing['import_marker'],
        )

    def parse_line(self, line: str) -> Optional[LineItem]:
        """
        Parse a single purchase line

        Returns:
            LineItem, or None if the line does not match the format
        """
        if not isinstance(line, str):
            return None

        parts = line.split(self.line_separator)
        if len(parts) != 2:
            return None

        quantity_and_name = parts[0].split()
        if len(quantity_and_name) < 2:
            return None

        quantity = parse_quantity(quantity_and_name[0])
        if quantity is None:
            return None

        name = ' '.join(quantity_and_name[1:])
        price = parse_price(parts[1])
        if price is None:
            return None

        return LineItem.create(
            name=name,
            quantity=quantity,
            unit_price=price,
            is_imported=self.import_marker in name,
            is_exempt=self.classifier.is_exempt(name),
            calculator=self.calculator,
        )

    def parse_items(self, lines: Iterable[str]) -> List[LineItem]:
        """
        Parse purchase lines, dropping the ones that do not match

        Args:
            lines: Raw text lines of one bill

        Returns:
            Parsed items in input order
        """
        items = []
        for line in lines:
            item = self.parse_line(line)
            if item is not None:
                items.append(item)
        return items


DEFAULT_PARSER = LineParser()


def parse_items(lines: Iterable[str]) -> List[LineItem]:
    """Parse purchase lines with the default grammar, keywords and rates"""
    return DEFAULT_PARSER.parse_items(lines)
