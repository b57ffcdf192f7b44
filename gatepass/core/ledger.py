"""
Selection Ledger

Working set of (product, quantity) pairs collected while a gate pass is being
authored. The only hard rule: an entry can never ask for more than the stock
the product had when the quantity was last checked.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from gatepass.core.records import ProductSnapshot
from gatepass.exceptions import InvalidQuantity, QuantityExceedsStock

logger = logging.getLogger(__name__)


def coerce_quantity(value) -> int:
    """
    Parse a requested transport quantity.

    Accepts ints and plain ASCII digit strings (what a form field posts).
    Anything else, and anything below 1, is an InvalidQuantity.
    """
    if isinstance(value, bool):
        raise InvalidQuantity(value)
    if isinstance(value, int):
        quantity = value
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        quantity = int(value.strip())
    else:
        raise InvalidQuantity(value)

    if quantity <= 0:
        raise InvalidQuantity(value)
    return quantity


@dataclass(frozen=True)
class SelectionEntry:
    """One product picked for transport and how many of it"""

    product: ProductSnapshot
    selected_quantity: int

    @property
    def product_key(self) -> str:
        return self.product.key

    def to_dict(self) -> Dict:
        return {'product': self.product.to_dict(), 'selectedQuantity': self.selected_quantity}


class SelectionLedger:
    """Ordered, per-product record of requested transport quantities"""

    def __init__(self):
        self._entries: 'OrderedDict[str, SelectionEntry]' = OrderedDict()

    def add_selection(self, product: ProductSnapshot, requested_quantity) -> SelectionEntry:
        """
        Record a quantity of a product for transport.

        Selecting a product that is already in the ledger adds to its
        quantity. The cap is checked against ``product.quantity`` on every
        call, so pass the freshest snapshot available.

        Raises:
            InvalidQuantity: requested_quantity is not a positive integer
            QuantityExceedsStock: the request, or the merged total, is more
                than the available stock
        """
        quantity = coerce_quantity(requested_quantity)

        if quantity > product.quantity:
            logger.info(f"Rejected {quantity} x {product.product_id}: only {product.quantity} available")
            raise QuantityExceedsStock(product.product_id, quantity, product.quantity)

        existing = self._entries.get(product.key)
        if existing is not None:
            merged = existing.selected_quantity + quantity
            if merged > product.quantity:
                logger.info(f"Rejected merge to {merged} x {product.product_id}: only {product.quantity} available")
                raise QuantityExceedsStock(product.product_id, merged, product.quantity, merged=True)
            entry = SelectionEntry(product=product, selected_quantity=merged)
        else:
            entry = SelectionEntry(product=product, selected_quantity=quantity)

        # Assigning an existing key keeps its original position
        self._entries[product.key] = entry
        return entry

    def remove_selection(self, product_key) -> Optional[SelectionEntry]:
        """Drop a product from the ledger; unknown keys are ignored."""
        return self._entries.pop(str(product_key), None)

    def clear(self):
        self._entries.clear()

    def entries(self) -> Tuple[SelectionEntry, ...]:
        return tuple(self._entries.values())

    def get(self, product_key) -> Optional[SelectionEntry]:
        return self._entries.get(str(product_key))

    def total_quantity(self) -> int:
        return sum(entry.selected_quantity for entry in self._entries.values())

    def __len__(self):
        return len(self._entries)

    def __bool__(self):
        return bool(self._entries)

    def __contains__(self, product_key):
        return str(product_key) in self._entries

    def __iter__(self):
        return iter(self.entries())

    def to_dict(self) -> Dict:
        return {'entries': [entry.to_dict() for entry in self._entries.values()]}

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'SelectionLedger':
        """Rebuild a ledger saved with to_dict (e.g. from the user session)."""
        ledger = cls()
        for item in (data or {}).get('entries', []):
            product = ProductSnapshot.from_dict(item['product'])
            ledger._entries[product.key] = SelectionEntry(
                product=product,
                selected_quantity=int(item['selectedQuantity'])
            )
        return ledger

    def __repr__(self):
        return f'<SelectionLedger {len(self)} entries>'
