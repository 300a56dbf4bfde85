#!/usr/bin/env python3
"""
Receipt Aggregator - Sum per-item totals and tax for one bill
"""

from decimal import Decimal
from typing import Iterable

from .models import LineItem, Report, ReportLine
from .tax_calculator import exact_context


def build_report(items: Iterable[LineItem]) -> Report:
    """
    Build the itemized report for one bill

    Args:
        items: Parsed line items, in receipt order

    Returns:
        Report with one line per item, total tax and total cost
    """
    lines = tuple(
        ReportLine(
            quantity=item.quantity,
            name=item.name,
            total_price=item.total_price,
            tax=item.total_tax,
        )
        for item in items
    )

    total_tax = Decimal('0')
    total_cost = Decimal('0')
    with exact_context(*(line.total_price for line in lines)):
        for line in lines:
            total_tax += line.tax
            total_cost += line.total_price

    return Report(lines=lines, total_tax=total_tax, total_cost=total_cost)
