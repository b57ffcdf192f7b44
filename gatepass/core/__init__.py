"""
Gate pass authoring core: selection ledger and gate pass assembler.
Nothing in here knows about Flask, the database or HTTP.
"""

from gatepass.core.records import ProductSnapshot, GatePassRecord, InventorySummary
from gatepass.core.ledger import SelectionLedger, SelectionEntry, coerce_quantity
from gatepass.core.assembler import (
    GatePassAssembler, GatePassMetadata, SessionState,
    validate, build_submission, format_gate_pass_date
)

__all__ = [
    'ProductSnapshot', 'GatePassRecord', 'InventorySummary',
    'SelectionLedger', 'SelectionEntry', 'coerce_quantity',
    'GatePassAssembler', 'GatePassMetadata', 'SessionState',
    'validate', 'build_submission', 'format_gate_pass_date',
]
