"""
Sales Tax Receipts
Parses purchase lines, applies basic sales tax and import duty with
round-up-to-0.05 rounding, and prints itemized receipts.
"""

from .exemption_classifier import ExemptionClassifier, is_exempt
from .line_parser import LineParser, parse_items
from .logger import setup_logger
from .models import Bill, LineItem, Report, ReportLine, format_amount
from .receipt_aggregator import build_report
from .receipt_printer import render_receipt, report_to_dict
from .rule_loader import RuleLoader
from .tax_calculator import TaxCalculator, compute_taxed_price

__all__ = [
    'parse_items',
    'is_exempt',
    'compute_taxed_price',
    'build_report',
    'render_receipt',
    'report_to_dict',
    'format_amount',
    'LineParser',
    'ExemptionClassifier',
    'TaxCalculator',
    'RuleLoader',
    'LineItem',
    'Bill',
    'Report',
    'ReportLine',
    'setup_logger',
]
