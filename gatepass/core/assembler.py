"""
Gate Pass Assembler
Turns a selection ledger plus shipment metadata into a gate pass submission,
hands it to the gate pass store and reconciles local state afterwards.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Callable, Dict, Optional

from gatepass.core.ledger import SelectionLedger
from gatepass.core.records import GatePassRecord, ProductSnapshot
from gatepass.exceptions import (
    EmptySelection, MissingDestination, MissingPreparer,
    SubmissionFailed, SubmissionInProgress, ValidationError
)

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Where an authoring session currently stands"""
    IDLE = 'idle'
    SELECTING = 'selecting'
    READY_TO_SUBMIT = 'ready_to_submit'
    SUBMITTED = 'submitted'
    SUBMISSION_FAILED = 'submission_failed'


@dataclass(frozen=True)
class GatePassMetadata:
    """Shipment details entered alongside the selected products"""

    destination: str = ''
    prepared_by: str = ''
    checked_by: str = ''
    authorized_by: str = ''

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> 'GatePassMetadata':
        data = data or {}
        return cls(
            destination=data.get('destination') or '',
            prepared_by=data.get('preparedBy') or '',
            checked_by=data.get('checkedBy') or '',
            authorized_by=data.get('authorizedBy') or '',
        )

    def to_dict(self) -> Dict:
        return {
            'destination': self.destination,
            'preparedBy': self.prepared_by,
            'checkedBy': self.checked_by,
            'authorizedBy': self.authorized_by,
        }


def format_gate_pass_date(value: date) -> str:
    """Calendar date the way the Indian locale prints it: D/M/YYYY"""
    return f'{value.day}/{value.month}/{value.year}'


def validate(ledger: SelectionLedger, metadata: GatePassMetadata):
    """
    Check that a gate pass can be generated.

    Raises EmptySelection, MissingDestination or MissingPreparer, in that
    order. Checker and authorizer may be left blank.
    """
    if not ledger.entries():
        raise EmptySelection()
    if not (metadata.destination or '').strip():
        raise MissingDestination()
    if not (metadata.prepared_by or '').strip():
        raise MissingPreparer()


def product_line(product: ProductSnapshot, selected_quantity: int) -> Dict:
    return {
        'productId': product.product_id,
        'name': product.name,
        'transport': product.transport,
        'description': product.description,
        'selectedQuantity': selected_quantity,
        'type': product.product_type,
        'remarks': product.remarks,
    }


def build_submission(ledger: SelectionLedger, metadata: GatePassMetadata,
                     current_date: Optional[date] = None) -> Dict:
    """
    Build the payload posted to the gate pass store.

    Store keys are dropped from the product lines; ``productId`` is kept so
    the store can match lines to stock. ``gatePassNumber`` and
    ``generatedAt`` are left to the store.
    """
    current_date = current_date or date.today()
    return {
        'date': format_gate_pass_date(current_date),
        'to': metadata.destination.strip(),
        'products': [
            product_line(entry.product, entry.selected_quantity)
            for entry in ledger.entries()
        ],
        'preparedBy': metadata.prepared_by.strip(),
        'checkedBy': (metadata.checked_by or '').strip(),
        'authorizedBy': (metadata.authorized_by or '').strip(),
    }


class GatePassAssembler:
    """
    One gate pass authoring session.

    Owns the ledger and metadata for the session. ``commit`` is the only step
    that talks to a store; everything before it is local and synchronous.
    """

    def __init__(self, ledger: Optional[SelectionLedger] = None,
                 metadata: Optional[GatePassMetadata] = None):
        self.ledger = ledger if ledger is not None else SelectionLedger()
        self.metadata = metadata if metadata is not None else GatePassMetadata()
        self.in_flight = False
        self.last_record: Optional[GatePassRecord] = None
        self.last_error: Optional[SubmissionFailed] = None
        # Result of the most recent commit: SUBMITTED or SUBMISSION_FAILED
        self.last_outcome: Optional[SessionState] = None

    @property
    def state(self) -> SessionState:
        """
        Current authoring state, derived from the ledger and metadata.

        A failed commit leaves everything in place, so the session reads as
        READY_TO_SUBMIT again; the failure itself stays in ``last_outcome``
        and ``last_error``.
        """
        if self.last_outcome is SessionState.SUBMITTED and not self.ledger:
            return SessionState.SUBMITTED
        if not self.ledger:
            return SessionState.IDLE
        return SessionState.READY_TO_SUBMIT if self.is_ready() else SessionState.SELECTING

    def is_ready(self) -> bool:
        try:
            validate(self.ledger, self.metadata)
        except ValidationError:
            return False
        return True

    def add_selection(self, product: ProductSnapshot, requested_quantity):
        self._guard_mutation()
        entry = self.ledger.add_selection(product, requested_quantity)
        self.last_outcome = None
        return entry

    def remove_selection(self, product_key):
        self._guard_mutation()
        self.last_outcome = None
        return self.ledger.remove_selection(product_key)

    def update_metadata(self, **changes):
        self._guard_mutation()
        self.metadata = replace(self.metadata, **changes)
        self.last_outcome = None
        return self.metadata

    def cancel(self):
        """Abandon the session locally; nothing is sent to any store."""
        self._guard_mutation()
        self.ledger.clear()
        self.metadata = GatePassMetadata()
        self.last_outcome = None
        self.last_error = None

    def validate(self):
        validate(self.ledger, self.metadata)

    def build_submission(self, current_date: Optional[date] = None) -> Dict:
        return build_submission(self.ledger, self.metadata, current_date)

    def commit(self, submission: Dict,
               gate_pass_store_create: Callable[[Dict], GatePassRecord],
               inventory_refresh: Optional[Callable] = None,
               history_refresh: Optional[Callable] = None) -> GatePassRecord:
        """
        Send a submission to the gate pass store.

        On success both refresh callbacks run, then the ledger and metadata
        are cleared and the store's record is returned. On any store failure
        SubmissionFailed is raised and the ledger and metadata are untouched,
        so the same submission can be retried.
        """
        if self.in_flight:
            raise SubmissionInProgress()

        self.in_flight = True
        try:
            record = gate_pass_store_create(submission)
        except Exception as e:
            self.last_outcome = SessionState.SUBMISSION_FAILED
            self.last_error = SubmissionFailed(str(e))
            logger.warning(f"Gate pass submission to {submission.get('to')} failed: {e}")
            raise self.last_error from e
        finally:
            self.in_flight = False

        logger.info(f"Gate pass {record.gate_pass_number} generated with {len(record.products)} line(s)")

        for refresh in (inventory_refresh, history_refresh):
            if refresh is None:
                continue
            try:
                refresh()
            except Exception as e:
                # The gate pass exists; a stale view must not bring the ledger back
                logger.error(f"Refresh after gate pass {record.gate_pass_number} failed: {e}")

        self.ledger.clear()
        self.metadata = GatePassMetadata()
        self.last_record = record
        self.last_error = None
        self.last_outcome = SessionState.SUBMITTED
        return record

    def submit(self, gate_pass_store_create, inventory_refresh=None, history_refresh=None,
               current_date: Optional[date] = None) -> GatePassRecord:
        """Validate, build and commit in one step."""
        self.validate()
        submission = self.build_submission(current_date)
        return self.commit(submission, gate_pass_store_create, inventory_refresh, history_refresh)

    def _guard_mutation(self):
        if self.in_flight:
            raise SubmissionInProgress()
