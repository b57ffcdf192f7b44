"""
Gate Pass Service
Gatepasses resource backed by the local database. Issuing a gate pass checks
every line against current stock, deducts the shipped quantities and assigns
the gate pass number and timestamp.
"""

import logging
from collections import OrderedDict
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from gatepass.constants import GATE_PASS_NUMBER_PREFIX, MOVEMENT_GATE_PASS
from gatepass.core.ledger import coerce_quantity
from gatepass.exceptions import (
    DuplicateSubmission, EmptySelection, InsufficientStock, InvalidProduct,
    MissingDestination, MissingPreparer, ProductNotFound, StoreError
)
from gatepass.models import db, GatePass, GatePassItem, StockMovement
from gatepass.services.inventory_service import InventoryService
from gatepass.utils.helpers import generate_gate_pass_number

logger = logging.getLogger(__name__)


class GatePassService:
    """Service for issuing and listing gate passes"""

    @staticmethod
    def list_gate_passes() -> List[GatePass]:
        """All gate passes, newest first"""
        return GatePass.query.order_by(GatePass.generated_at.desc(), GatePass.id.desc()).all()

    @staticmethod
    def get_gate_pass(gate_pass_key) -> GatePass:
        try:
            gate_pass_id = int(gate_pass_key)
        except (TypeError, ValueError):
            raise StoreError(f'Gate pass not found: {gate_pass_key}', status_code=404)

        gate_pass = db.session.get(GatePass, gate_pass_id)
        if gate_pass is None:
            raise StoreError(f'Gate pass not found: {gate_pass_key}', status_code=404)
        return gate_pass

    @staticmethod
    def find_by_token(submit_token) -> Optional[GatePass]:
        if not submit_token:
            return None
        return GatePass.query.filter_by(submit_token=str(submit_token)).first()

    @staticmethod
    def _check_submission(submission: Dict):
        """Reject incomplete submissions the same way the assembler would"""
        lines = submission.get('products')
        if not lines:
            raise EmptySelection()
        if not isinstance(lines, list) or not all(isinstance(line, dict) for line in lines):
            raise InvalidProduct('Gate pass products must be a list of product lines', field='products')
        if not (submission.get('to') or '').strip():
            raise MissingDestination()
        if not (submission.get('preparedBy') or '').strip():
            raise MissingPreparer()

    @staticmethod
    def create_gate_pass(submission: Dict) -> GatePass:
        """
        Issue a gate pass

        Args:
            submission: Payload with date, to, products, preparedBy,
                checkedBy and authorizedBy, plus an optional submitToken
                identifying the form it came from

        Returns:
            GatePass: the stored gate pass

        Raises:
            EmptySelection, MissingDestination, MissingPreparer: incomplete payload
            InvalidProduct: products is not a list of product lines
            InvalidQuantity: a line quantity is not a positive integer
            DuplicateSubmission: a gate pass already exists for submitToken
            ProductNotFound: a line names an unknown productId
            InsufficientStock: stock ran out since the selection was made
        """
        submission = submission or {}
        GatePassService._check_submission(submission)

        submit_token = submission.get('submitToken') or None
        existing = GatePassService.find_by_token(submit_token)
        if existing is not None:
            logger.warning(f"Rejected repeated submission of gate pass {existing.gate_pass_number}")
            raise DuplicateSubmission(existing.gate_pass_number)

        lines = submission['products']
        requested = OrderedDict()
        for line in lines:
            code = line.get('productId')
            quantity = coerce_quantity(line.get('selectedQuantity'))
            requested[code] = requested.get(code, 0) + quantity

        # Check every line before touching stock so a rejection writes nothing
        products = {}
        for code, quantity in requested.items():
            product = InventoryService.find_by_code(code)
            if product is None:
                raise ProductNotFound(code)
            if quantity > (product.quantity or 0):
                raise InsufficientStock(code, quantity, product.quantity or 0)
            products[code] = product

        try:
            gate_pass = GatePass(
                gate_pass_number=generate_gate_pass_number(GATE_PASS_NUMBER_PREFIX),
                date=(submission.get('date') or '').strip() or datetime.now().strftime('%d/%m/%Y'),
                destination=submission['to'].strip(),
                prepared_by=submission['preparedBy'].strip(),
                checked_by=(submission.get('checkedBy') or '').strip(),
                authorized_by=(submission.get('authorizedBy') or '').strip(),
                submit_token=str(submit_token) if submit_token else None,
                generated_at=datetime.utcnow()
            )
            db.session.add(gate_pass)
            db.session.flush()

            for line_number, line in enumerate(lines, 1):
                product = products[line.get('productId')]
                quantity = coerce_quantity(line.get('selectedQuantity'))
                db.session.add(GatePassItem(
                    gate_pass_id=gate_pass.id,
                    line_number=line_number,
                    product_code=product.product_code,
                    name=line.get('name') or product.name,
                    transport=line.get('transport') or product.transport,
                    description=line.get('description') or product.description,
                    selected_quantity=quantity,
                    product_type=line.get('type') or product.product_type,
                    remarks=line.get('remarks') or product.remarks
                ))
                product.quantity -= quantity
                db.session.add(StockMovement(
                    product_id=product.id,
                    movement_type=MOVEMENT_GATE_PASS,
                    quantity=-quantity,
                    reference=gate_pass.gate_pass_number,
                    notes=f'Dispatched to {gate_pass.destination}'
                ))

            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            # A concurrent request with the same token committed first
            existing = GatePassService.find_by_token(submit_token)
            if existing is not None:
                raise DuplicateSubmission(existing.gate_pass_number)
            raise
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"Gate pass {gate_pass.gate_pass_number} issued to {gate_pass.destination} "
                    f"({len(lines)} line(s))")
        return gate_pass
