#!/usr/bin/env python3
"""
Tax Calculator - Per-unit taxed price with basic sales tax and import duty

Basic sales tax and import duty are summed first, then the combined tax is
rounded UP to the nearest rounding increment (0.05 by default):

    tax = ceiling(tax / 0.05) * 0.05      i.e. ceiling(tax * 20) / 20

Rounding each surcharge separately gives different results, so there is
exactly one rounding step. All arithmetic is done with Decimal, inside a
context whose precision covers every digit of the operands, so amounts of
any magnitude are never silently rounded to the default 28 digits.
"""

import logging
from contextlib import contextmanager
from decimal import Decimal, localcontext
from typing import Iterator, Union

from .config import DEFAULT_TAX_RULES

logger = logging.getLogger(__name__)

Amount = Union[Decimal, int, float, str]

# Headroom for carries out of sums and the extra quotient digit in round_up
_PRECISION_MARGIN = 4


def to_decimal(value: Amount) -> Decimal:
    """Convert an amount to Decimal (floats go through str to keep their printed value)"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def exact_precision(*values: Amount) -> int:
    """
    Number of significant digits that sums and products of values can need

    Args:
        values: Operands of the arithmetic about to be performed

    Returns:
        Precision large enough that adding or multiplying the values is exact
    """
    digits = _PRECISION_MARGIN
    for value in values:
        _, coefficient, exponent = to_decimal(value).as_tuple()
        if isinstance(exponent, int):
            digits += len(coefficient) + abs(exponent)
    return digits


@contextmanager
def exact_context(*values: Amount) -> Iterator:
    """Decimal context with at least exact_precision(*values) digits"""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, exact_precision(*values))
        yield ctx


class TaxCalculator:
    """Compute taxed unit prices from exemption and import flags"""

    def __init__(self, basic_rate: Amount = DEFAULT_TAX_RULES['tax_rates']['basic_sales_tax'],
                 import_rate: Amount = DEFAULT_TAX_RULES['tax_rates']['import_duty'],
                 rounding_increment: Amount = DEFAULT_TAX_RULES['tax_rates']['rounding_increment']):
        """
        Initialize tax calculator

        Args:
            basic_rate: Basic sales tax rate, skipped for exempt items
            import_rate: Import duty rate, applied to every imported item
            rounding_increment: Combined tax is rounded up to a multiple of this
        """
        self.basic_rate = to_decimal(basic_rate)
        self.import_rate = to_decimal(import_rate)
        self.rounding_increment = to_decimal(rounding_increment)

        if self.rounding_increment <= 0:
            raise ValueError(f"rounding_increment must be greater than zero, got {self.rounding_increment}")

    @classmethod
    def from_rule_loader(cls, rule_loader) -> 'TaxCalculator':
        """Build a calculator from the tax_rates section of tax_rules.yaml"""
        rates = rule_loader.get_tax_rates()
        logger.debug(
            f"Tax rates: basic={rates['basic_sales_tax']} import={rates['import_duty']} "
            f"increment={rates['rounding_increment']}"
        )
        return cls(
            basic_rate=rates['basic_sales_tax'],
            import_rate=rates['import_duty'],
            rounding_increment=rates['rounding_increment'],
        )

    def round_up(self, tax: Amount) -> Decimal:
        """Round tax UP (toward +infinity) to the nearest multiple of the rounding increment"""
        tax = to_decimal(tax)
        with exact_context(tax, self.rounding_increment, self.rounding_increment):
            # divmod truncates toward zero; step up only when a positive remainder is left
            steps, remainder = divmod(tax, self.rounding_increment)
            if remainder > 0:
                steps += 1
            return steps * self.rounding_increment

    def compute_tax(self, unit_price: Amount, is_exempt: bool, is_imported: bool) -> Decimal:
        """
        Compute the rounded tax for one unit

        Args:
            unit_price: Pre-tax price of one unit (must not be negative)
            is_exempt: Skip basic sales tax
            is_imported: Add import duty

        Returns:
            Rounded per-unit tax
        """
        price = to_decimal(unit_price)
        if not price.is_finite() or price < 0:
            raise ValueError(f"unit_price must be a non-negative number, got {unit_price!r}")

        with exact_context(price, price, self.basic_rate, self.import_rate):
            tax = Decimal('0')
            if not is_exempt:
                tax += self.basic_rate * price
            if is_imported:
                tax += self.import_rate * price

        return self.round_up(tax)

    def compute_taxed_price(self, unit_price: Amount, is_exempt: bool, is_imported: bool) -> Decimal:
        """Return unit_price plus its rounded per-unit tax"""
        price = to_decimal(unit_price)
        tax = self.compute_tax(price, is_exempt, is_imported)
        with exact_context(price, tax):
            return price + tax


DEFAULT_CALCULATOR = TaxCalculator()


def compute_taxed_price(unit_price: Amount, is_exempt: bool, is_imported: bool) -> Decimal:
    """Taxed unit price using the default rates (10% basic, 5% import, round up to 0.05)"""
    return DEFAULT_CALCULATOR.compute_taxed_price(unit_price, is_exempt, is_imported)
