#!/usr/bin/env python3
"""
Line Parser Tests
Tests parsing of "<quantity> <name> at <price>" lines and silent dropping of malformed lines.
"""

import logging
import unittest
from decimal import Decimal

from salestax.exemption_classifier import ExemptionClassifier
from salestax.line_parser import LineParser, parse_items, parse_price, parse_quantity
from salestax.models import LineItem
from salestax.tax_calculator import TaxCalculator


class TestLineParser(unittest.TestCase):
    """Test parsing of purchase lines with the default rules"""

    def test_imported_box_of_chocolates(self):
        items = parse_items(['1 imported box of chocolates at 10.00'])
        self.assertEqual(len(items), 1)

        item = items[0]
        self.assertEqual(item.quantity, 1)
        self.assertEqual(item.name, 'imported box of chocolates')
        self.assertEqual(item.unit_price, Decimal('10.00'))
        self.assertTrue(item.is_imported)
        self.assertTrue(item.is_exempt)
        self.assertEqual(item.taxed_unit_price, Decimal('10.50'))

    def test_missing_quantity_yields_no_items(self):
        self.assertEqual(parse_items(['book at 12.49']), [])

    def test_order_preserved_and_bad_lines_dropped(self):
        lines = [
            '2 book at 12.49',
            'this is not an item',
            '1 music CD at 14.99',
            'x chocolate bar at 0.85',
            '1 chocolate bar at 0.85',
        ]
        names = [item.name for item in parse_items(lines)]
        self.assertEqual(names, ['book', 'music CD', 'chocolate bar'])

    def test_malformed_lines(self):
        """Each of these lines fails one parse step"""
        malformed = [
            '',
            '1 book',                      # no separator
            '1 book at 12.49 at 3.00',     # separator twice
            '1 at 12.49',                  # no name
            'one book at 12.49',           # quantity not an integer
            '1.5 book at 12.49',           # quantity not an integer
            '0 book at 12.49',             # quantity below 1
            '-2 book at 12.49',            # negative quantity
            '1 book at twelve',            # price not a number
            '1 book at -12.49',            # negative price
            '1 book at 1e3',               # exponent
            '1 book at 1,000.00',          # thousands separator
            '1 book at NaN',
            '1 book at ',                  # empty price
            '1 book\tat 12.49',            # separator is literally " at "
        ]
        for line in malformed:
            with self.subTest(line=line):
                self.assertEqual(parse_items([line]), [])

    def test_parsing_emits_no_log_records(self):
        parser_logger = logging.getLogger('salestax.line_parser')
        with self.assertLogs(parser_logger, level='DEBUG') as logs:
            parse_items(['2 book at 12.49', 'not an item', '1 music CD at 14.99'])
            parser_logger.debug('end of parse')
        self.assertEqual(logs.output, ['DEBUG:salestax.line_parser:end of parse'])

    def test_non_string_lines_dropped(self):
        self.assertEqual(parse_items([None, 42, '1 book at 12.49'])[0].name, 'book')

    def test_name_whitespace_normalized(self):
        items = parse_items(['  3   bottle   of\tperfume at 18.99  '])
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0].quantity, 3)
        self.assertEqual(items[0].name, 'bottle of perfume')
        self.assertEqual(items[0].unit_price, Decimal('18.99'))

    def test_price_forms(self):
        self.assertEqual(parse_items(['1 music CD at 15'])[0].unit_price, Decimal('15'))
        self.assertEqual(parse_items(['1 music CD at .50'])[0].unit_price, Decimal('0.50'))
        self.assertEqual(parse_items(['+2 music CD at +3.00'])[0].quantity, 2)

    def test_import_marker_case_sensitive(self):
        self.assertFalse(parse_items(['1 Imported bottle of perfume at 27.99'])[0].is_imported)
        self.assertTrue(parse_items(['1 reimported bottle of perfume at 27.99'])[0].is_imported)

    def test_taxed_price_derived_at_creation(self):
        item = parse_items(['1 imported bottle of perfume at 27.99'])[0]
        self.assertTrue(item.is_imported)
        self.assertFalse(item.is_exempt)
        self.assertEqual(item.taxed_unit_price, Decimal('32.19'))


class TestTokenParsing(unittest.TestCase):
    """Test quantity and price token helpers"""

    def test_parse_quantity(self):
        self.assertEqual(parse_quantity('12'), 12)
        self.assertEqual(parse_quantity('+1'), 1)
        self.assertIsNone(parse_quantity('0'))
        self.assertIsNone(parse_quantity('1_000'))
        self.assertIsNone(parse_quantity('abc'))

    def test_parse_price(self):
        self.assertEqual(parse_price(' 12.49 '), Decimal('12.49'))
        self.assertEqual(parse_price('0'), Decimal('0'))
        self.assertIsNone(parse_price('Infinity'))
        self.assertIsNone(parse_price('1_000.00'))
        self.assertIsNone(parse_price(''))


class TestParserWithCustomRules(unittest.TestCase):
    """Test substituting classifier, calculator and grammar tokens"""

    @classmethod
    def setUpClass(cls):
        cls.parser = LineParser(
            classifier=ExemptionClassifier(['bread']),
            calculator=TaxCalculator(basic_rate='0.20', import_rate='0.10'),
            line_separator=' @ ',
            import_marker='foreign',
        )

    def test_custom_grammar(self):
        item = self.parser.parse_line('2 foreign loaf of bread @ 2.00')
        self.assertIsNotNone(item)
        self.assertEqual(item.quantity, 2)
        self.assertTrue(item.is_imported)
        self.assertTrue(item.is_exempt)
        self.assertEqual(item.taxed_unit_price, Decimal('2.20'))

    def test_default_separator_not_recognized(self):
        self.assertIsNone(self.parser.parse_line('1 book at 12.49'))

    def test_book_taxed_when_not_in_keywords(self):
        item = self.parser.parse_line('1 book @ 10.00')
        self.assertFalse(item.is_exempt)
        self.assertEqual(item.taxed_unit_price, Decimal('12.00'))


class TestLineItem(unittest.TestCase):
    """Test LineItem invariants and derived amounts"""

    def test_derived_totals(self):
        item = LineItem.create('music CD', 2, Decimal('14.99'), False, False)
        self.assertEqual(item.unit_tax, Decimal('1.50'))
        self.assertEqual(item.total_price, Decimal('32.98'))
        self.assertEqual(item.total_tax, Decimal('3.00'))

    def test_invariants(self):
        with self.assertRaises(ValueError):
            LineItem('book', 0, Decimal('1'), False, True, Decimal('1'))
        with self.assertRaises(ValueError):
            LineItem('book', 1, Decimal('-1'), False, True, Decimal('-1'))
        with self.assertRaises(ValueError):
            LineItem('book', 1, Decimal('2'), False, True, Decimal('1'))

    def test_immutable(self):
        item = LineItem.create('book', 1, Decimal('12.49'), False, True)
        with self.assertRaises(AttributeError):
            item.quantity = 5


if __name__ == '__main__':
    unittest.main()
