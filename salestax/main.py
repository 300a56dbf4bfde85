#!/usr/bin/env python3
"""
Sales Tax Main Entry Point - Interactive and batch receipt printing

Interactive mode (default) reads purchase lines from stdin one bill at a time:

    Enter item details for Input 1 (e.g., '1 book at 12.49'). Type 'done' when finished with this bill:
    2 book at 12.49
    1 music CD at 14.99
    done

prints the receipt, then asks whether to enter another bill ("yes" continues).

Batch mode (--input FILE) reads bills separated by 'done' lines and prints
every receipt without prompting.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Iterator, List, Optional, TextIO, Tuple

from .config import DEFAULT_TAX_RULES, LOG_LEVEL_ENV, LOGGING, PROMPTS
from .line_parser import LineParser
from .logger import setup_logger
from .models import Bill, Report
from .receipt_aggregator import build_report
from .receipt_printer import render_receipt, report_to_dict
from .rule_loader import RuleLoader

logger = logging.getLogger(__name__)


def read_bill_lines(stream: TextIO, sentinel: str = 'done') -> Tuple[List[str], bool]:
    """
    Read raw lines of one bill until the sentinel line or end of input

    Args:
        stream: Text stream to read from
        sentinel: Line (trimmed, case-insensitive) that ends the bill

    Returns:
        Tuple of (lines, reached_eof)
    """
    lines = []
    while True:
        raw = stream.readline()
        if raw == '':
            return lines, True

        line = raw.rstrip('\r\n')
        if line.strip().lower() == sentinel:
            return lines, False
        lines.append(line)


def iter_bills(stream: TextIO, sentinel: str = 'done') -> Iterator[List[str]]:
    """Yield the raw lines of each bill in a batch file; a blank trailing chunk is skipped"""
    while True:
        lines, reached_eof = read_bill_lines(stream, sentinel)
        if reached_eof:
            if any(line.strip() for line in lines):
                yield lines
            return
        yield lines


class ReceiptSession:
    """Run bills through parse -> tax -> aggregate -> print, one at a time"""

    def __init__(self, parser: Optional[LineParser] = None,
                 bill_sentinel: str = DEFAULT_TAX_RULES['driver']['bill_sentinel'],
                 continue_answer: str = DEFAULT_TAX_RULES['driver']['continue_answer'],
                 output_json: bool = False):
        """
        Initialize receipt session

        Args:
            parser: Line parser (default rules if None)
            bill_sentinel: Line that ends a bill
            continue_answer: Answer that starts another bill
            output_json: Print JSON instead of receipt text
        """
        self.parser = parser or LineParser()
        self.bill_sentinel = bill_sentinel
        self.continue_answer = continue_answer
        self.output_json = output_json

    @classmethod
    def from_rule_loader(cls, rule_loader: RuleLoader, output_json: bool = False) -> 'ReceiptSession':
        driver = rule_loader.get_driver_rules()
        return cls(
            parser=LineParser.from_rule_loader(rule_loader),
            bill_sentinel=driver['bill_sentinel'] or DEFAULT_TAX_RULES['driver']['bill_sentinel'],
            continue_answer=driver['continue_answer'] or DEFAULT_TAX_RULES['driver']['continue_answer'],
            output_json=output_json,
        )

    def process_bill(self, lines: List[str], bill_number: int) -> Report:
        """Parse and total one bill"""
        bill = Bill(number=bill_number, items=tuple(self.parser.parse_items(lines)))
        if not bill.items:
            logger.warning(f"Bill {bill.number}: no items entered")

        report = build_report(bill.items)
        logger.info(
            f"Bill {bill.number}: {len(bill.items)} items, "
            f"sales taxes {report.formatted_total_tax}, total {report.formatted_total_cost}"
        )
        return report

    def format_report(self, report: Report, bill_number: int) -> str:
        if self.output_json:
            return json.dumps(report_to_dict(report, bill_number), indent=2)
        return render_receipt(report, bill_number)

    def run_interactive(self, input_stream: TextIO, output_stream: TextIO) -> int:
        """
        Prompt for bills until the user declines to continue or input ends

        Returns:
            Number of bills printed
        """
        bill_number = 1
        while True:
            print(PROMPTS['bill'].format(bill_number=bill_number), file=output_stream)
            lines, reached_eof = read_bill_lines(input_stream, self.bill_sentinel)
            if reached_eof and not lines:
                return bill_number - 1

            report = self.process_bill(lines, bill_number)
            print('', file=output_stream)
            print(self.format_report(report, bill_number), file=output_stream)
            print('', file=output_stream)

            if reached_eof:
                return bill_number

            print(PROMPTS['continue'], file=output_stream)
            answer = input_stream.readline()
            if answer.strip().lower() != self.continue_answer:
                return bill_number

            bill_number += 1

    def run_batch(self, input_stream: TextIO, output_stream: TextIO) -> int:
        """
        Print a receipt for every bill in the stream

        Returns:
            Number of bills printed
        """
        reports = []
        for bill_number, lines in enumerate(iter_bills(input_stream, self.bill_sentinel), start=1):
            reports.append((bill_number, self.process_bill(lines, bill_number)))

        if self.output_json:
            data = [report_to_dict(report, bill_number) for bill_number, report in reports]
            print(json.dumps(data, indent=2), file=output_stream)
        else:
            print('\n\n'.join(render_receipt(report, bill_number) for bill_number, report in reports),
                  file=output_stream)

        return len(reports)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the sales tax receipt calculator"""
    parser = argparse.ArgumentParser(
        prog='salestax',
        description='Print sales tax receipts from purchase lines like "1 book at 12.49"',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        '--input', '-i',
        type=str,
        default=None,
        help="Read bills from a file (bills separated by 'done' lines) instead of prompting"
    )
    parser.add_argument(
        '--rules-dir',
        type=str,
        default=None,
        help='Directory containing tax_rules.yaml (default: packaged rules)'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Print receipts as JSON'
    )
    parser.add_argument(
        '--log-level',
        type=str.upper,
        default=os.environ.get(LOG_LEVEL_ENV, LOGGING['level']).upper(),
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: INFO or $SALESTAX_LOG_LEVEL)'
    )
    parser.add_argument(
        '--log-dir',
        type=str,
        default=None,
        help='Also write logs to LOG_DIR/salestax.log'
    )

    args = parser.parse_args(argv)

    setup_logger(log_level=args.log_level, log_dir=Path(args.log_dir) if args.log_dir else None)

    rule_loader = RuleLoader(Path(args.rules_dir) if args.rules_dir else None)
    logger.debug(f"Rules directory: {rule_loader.rules_dir}")

    try:
        session = ReceiptSession.from_rule_loader(rule_loader, output_json=args.json)
    except ValueError as e:
        logger.error(f"Invalid tax rules: {e}")
        print(f"Invalid tax rules: {e}", file=sys.stderr)
        return 1

    if args.input:
        logger.info(f"Input file: {args.input}")
        try:
            with open(args.input, 'r', encoding='utf-8') as f:
                count = session.run_batch(f, sys.stdout)
        except OSError as e:
            logger.error(f"Could not read input file {args.input}: {e}")
            print(f"Could not read input file {args.input}: {e}", file=sys.stderr)
            return 1
    else:
        count = session.run_interactive(sys.stdin, sys.stdout)

    logger.info(f"Printed {count} receipts")
    return 0


if __name__ == "__main__":
    sys.exit(main())
