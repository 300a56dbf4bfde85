#!/usr/bin/env python3
"""
Receipt Printer - Render a bill report as receipt text or a JSON-ready dict

Text format:

    Output <N>:
    <quantity> <name>: <total price>
    ...
    Sales Taxes: <total tax>
    Total: <total cost>
"""

from typing import Any, Dict

from .models import Report


def render_receipt(report: Report, bill_number: int) -> str:
    """
    Render the receipt text for one bill (no trailing newline)

    Args:
        report: Report from build_report()
        bill_number: Sequence number of the bill in the session (1-based)

    Returns:
        Receipt text
    """
    lines = [f"Output {bill_number}:"]
    lines.extend(report.display_lines)
    lines.append(f"Sales Taxes: {report.formatted_total_tax}")
    lines.append(f"Total: {report.formatted_total_cost}")
    return '\n'.join(lines)


def report_to_dict(report: Report, bill_number: int) -> Dict[str, Any]:
    """Report as a dictionary for json.dumps, tagged with its bill number"""
    data = {'bill': bill_number}
    data.update(report.to_dict())
    return data
