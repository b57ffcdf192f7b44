"""
Read-only views of the store's products and gate passes.

The stores speak the JSON shapes of the ``products`` and ``gatepasses``
resources (``_id``, ``productId``, ``from``, ``to`` ...). These dataclasses are
the core's immutable snapshots of those shapes.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from gatepass.constants import DEFAULT_PRODUCT_TYPE, DEFAULT_TRANSPORT, GATE_PASS_LINE_FIELDS


@dataclass(frozen=True)
class ProductSnapshot:
    """A product as read from the inventory store at one moment."""

    key: str
    product_id: str
    name: str
    quantity: int
    transport: str = DEFAULT_TRANSPORT
    description: str = ''
    from_location: str = ''
    to_location: str = ''
    product_type: str = DEFAULT_PRODUCT_TYPE
    remarks: str = ''

    @classmethod
    def from_dict(cls, data: Dict) -> 'ProductSnapshot':
        return cls(
            key=str(data['_id']),
            product_id=data.get('productId') or '',
            name=data.get('name') or '',
            quantity=int(data.get('quantity') or 0),
            transport=data.get('transport') or DEFAULT_TRANSPORT,
            description=data.get('description') or '',
            from_location=data.get('from') or '',
            to_location=data.get('to') or '',
            product_type=data.get('type') or DEFAULT_PRODUCT_TYPE,
            remarks=data.get('remarks') or '',
        )

    def to_dict(self) -> Dict:
        return {
            '_id': self.key,
            'productId': self.product_id,
            'name': self.name,
            'transport': self.transport,
            'description': self.description,
            'quantity': self.quantity,
            'from': self.from_location,
            'to': self.to_location,
            'type': self.product_type,
            'remarks': self.remarks,
        }

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on name, product ID or type."""
        term = (term or '').strip().lower()
        if not term:
            return True
        return (
            term in self.name.lower()
            or term in self.product_id.lower()
            or term in self.product_type.lower()
        )


@dataclass(frozen=True)
class GatePassRecord:
    """A gate pass as acknowledged by the gate pass store."""

    key: str
    gate_pass_number: str
    date: str
    to: str
    products: Tuple[Dict, ...]
    prepared_by: str
    checked_by: str = ''
    authorized_by: str = ''
    generated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict) -> 'GatePassRecord':
        lines = []
        for line in data.get('products') or []:
            lines.append({name: line.get(name) for name in GATE_PASS_LINE_FIELDS})
        return cls(
            key=str(data.get('_id', '')),
            gate_pass_number=data.get('gatePassNumber') or '',
            date=data.get('date') or '',
            to=data.get('to') or '',
            products=tuple(lines),
            prepared_by=data.get('preparedBy') or '',
            checked_by=data.get('checkedBy') or '',
            authorized_by=data.get('authorizedBy') or '',
            generated_at=data.get('generatedAt'),
        )

    @property
    def total_quantity(self) -> int:
        return sum(int(line.get('selectedQuantity') or 0) for line in self.products)

    def to_dict(self) -> Dict:
        return {
            '_id': self.key,
            'gatePassNumber': self.gate_pass_number,
            'date': self.date,
            'to': self.to,
            'products': [dict(line) for line in self.products],
            'preparedBy': self.prepared_by,
            'checkedBy': self.checked_by,
            'authorizedBy': self.authorized_by,
            'generatedAt': self.generated_at,
        }


@dataclass(frozen=True)
class InventorySummary:
    """Headline figures shown under the product table."""

    total_products: int = 0
    total_quantity: int = 0
    product_types: int = 0
    transport_modes: int = 0

    @classmethod
    def from_products(cls, products: List[ProductSnapshot]) -> 'InventorySummary':
        return cls(
            total_products=len(products),
            total_quantity=sum(p.quantity for p in products),
            product_types=len({p.product_type for p in products}),
            transport_modes=len({p.transport for p in products}),
        )
