"""
Receipt data models: parsed line items, bills and per-bill reports.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Tuple

from .config import AMOUNT_DISPLAY
from .tax_calculator import DEFAULT_CALCULATOR, exact_context

_QUANTUM = Decimal(AMOUNT_DISPLAY['quantum'])


def format_amount(value: Decimal) -> str:
    """Format an amount with exactly two decimals, rounding half up."""
    value = Decimal(value)
    with exact_context(value, _QUANTUM):
        return str(value.quantize(_QUANTUM, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class LineItem:
    """
    One parsed purchase line.

    taxed_unit_price is derived once (see LineItem.create) and the item is
    never mutated afterwards.
    """

    name: str
    quantity: int
    unit_price: Decimal
    is_imported: bool
    is_exempt: bool
    taxed_unit_price: Decimal

    def __post_init__(self):
        if self.quantity < 1:
            raise ValueError(f"quantity must be at least 1, got {self.quantity}")
        if self.unit_price < 0:
            raise ValueError(f"unit_price must not be negative, got {self.unit_price}")
        if self.taxed_unit_price < self.unit_price:
            raise ValueError(
                f"taxed_unit_price {self.taxed_unit_price} is below unit_price {self.unit_price}"
            )

    @classmethod
    def create(cls, name: str, quantity: int, unit_price: Decimal,
               is_imported: bool, is_exempt: bool, calculator=None) -> 'LineItem':
        """Build an item, deriving taxed_unit_price with the given (or default) calculator."""
        if calculator is None:
            calculator = DEFAULT_CALCULATOR

        taxed_unit_price = calculator.compute_taxed_price(unit_price, is_exempt, is_imported)
        return cls(
            name=name,
            quantity=quantity,
            unit_price=unit_price,
            is_imported=is_imported,
            is_exempt=is_exempt,
            taxed_unit_price=taxed_unit_price,
        )

    @property
    def unit_tax(self) -> Decimal:
        with exact_context(self.taxed_unit_price, self.unit_price):
            return self.taxed_unit_price - self.unit_price

    @property
    def total_price(self) -> Decimal:
        """Taxed price for the whole quantity."""
        with exact_context(self.taxed_unit_price, self.quantity):
            return self.taxed_unit_price * self.quantity

    @property
    def total_tax(self) -> Decimal:
        """Tax for the whole quantity."""
        unit_tax = self.unit_tax
        with exact_context(unit_tax, self.quantity):
            return unit_tax * self.quantity


@dataclass(frozen=True)
class Bill:
    """The nth batch of items entered in a session."""

    number: int
    items: Tuple[LineItem, ...] = ()


@dataclass(frozen=True)
class ReportLine:
    quantity: int
    name: str
    total_price: Decimal
    tax: Decimal

    @property
    def display(self) -> str:
        return f"{self.quantity} {self.name}: {format_amount(self.total_price)}"


@dataclass(frozen=True)
class Report:
    """Itemized totals for one bill."""

    lines: Tuple[ReportLine, ...] = field(default_factory=tuple)
    total_tax: Decimal = Decimal('0')
    total_cost: Decimal = Decimal('0')

    @property
    def display_lines(self) -> List[str]:
        return [line.display for line in self.lines]

    @property
    def formatted_total_tax(self) -> str:
        return format_amount(self.total_tax)

    @property
    def formatted_total_cost(self) -> str:
        return format_amount(self.total_cost)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the report to a JSON-serializable dictionary (amounts as 2-decimal strings)."""
        return {
            'items': [
                {
                    'quantity': line.quantity,
                    'name': line.name,
                    'total_price': format_amount(line.total_price),
                    'tax': format_amount(line.tax),
                }
                for line in self.lines
            ],
            'sales_taxes': self.formatted_total_tax,
            'total': self.formatted_total_cost,
        }
