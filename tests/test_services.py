"""
Tests for the database-backed inventory and gate pass services

Tests cover:
- Product drafts: required fields, defaults, codes
- Soft delete and quantity updates with stock movements
- Gate pass issue: stock checks, deduction, numbering, atomicity
"""

import pytest
from datetime import datetime

from gatepass.constants import MOVEMENT_ADJUSTMENT, MOVEMENT_GATE_PASS, MOVEMENT_RECEIPT
from gatepass.exceptions import (
    DuplicateSubmission, EmptySelection, InsufficientStock, InvalidProduct, InvalidQuantity,
    MissingDestination, MissingPreparer, ProductNotFound, StoreError
)
from gatepass.models import db, GatePass, Product, StockMovement
from gatepass.services.gate_pass_service import GatePassService
from gatepass.services.inventory_service import InventoryService


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def make_submission(*lines, to='Hyderabad GIS', prepared_by='A. Rao'):
    """Build a gate pass payload from (productId, quantity) pairs"""
    return {
        'date': '18/10/2026',
        'to': to,
        'products': [
            {'productId': code, 'name': f'Item {code}', 'transport': 'Road',
             'description': '', 'selectedQuantity': quantity, 'type': 'Electronics', 'remarks': ''}
            for code, quantity in lines
        ],
        'preparedBy': prepared_by,
        'checkedBy': '',
        'authorizedBy': ''
    }


# ============================================================================
# INVENTORY SERVICE
# ============================================================================

class TestInventoryService:
    """Test product management"""

    def test_create_product_with_defaults(self, fresh_app):
        """Test transport, type and destination default when left blank"""
        product = InventoryService.create_product({
            'name': 'Bus Bar Clamp', 'quantity': '12', 'from': 'Central Stores'
        })

        assert product.product_code == 'VGS-0001'
        assert product.transport == 'Road'
        assert product.product_type == 'Electronics'
        assert product.to_location == 'Vemagiri GIS'
        assert product.quantity == 12

    def test_create_product_records_opening_stock(self, fresh_app):
        product = InventoryService.create_product({
            'name': 'Bus Bar Clamp', 'quantity': 12, 'from': 'Central Stores'
        })

        movement = StockMovement.query.filter_by(product_id=product.id).one()
        assert movement.movement_type == MOVEMENT_RECEIPT
        assert movement.quantity == 12

    def test_product_codes_are_sequential(self, init_database):
        """Test codes continue after the highest existing one"""
        product = InventoryService.create_product({
            'name': 'Insulator String', 'quantity': 3, 'from': 'Central Stores'
        })

        assert product.product_code == 'VGS-0005'

    @pytest.mark.parametrize('draft', [
        {'quantity': 1, 'from': 'Stores'},
        {'name': 'Clamp', 'from': 'Stores'},
        {'name': 'Clamp', 'quantity': 1},
        {'name': '   ', 'quantity': 1, 'from': 'Stores'},
    ])
    def test_required_fields(self, fresh_app, draft):
        """Test name, quantity and from are required"""
        with pytest.raises(InvalidProduct) as exc_info:
            InventoryService.create_product(draft)

        assert 'Name, Quantity, From' in str(exc_info.value)
        assert Product.query.count() == 0

    @pytest.mark.parametrize('draft,field', [
        ({'name': 'Clamp', 'quantity': '-2', 'from': 'Stores'}, 'quantity'),
        ({'name': 'Clamp', 'quantity': '1.5', 'from': 'Stores'}, 'quantity'),
        ({'name': 'Clamp', 'quantity': 1, 'from': 'Stores', 'transport': 'Teleport'}, 'transport'),
        ({'name': 'Clamp', 'quantity': 1, 'from': 'Stores', 'type': 'Weapons'}, 'type'),
    ])
    def test_invalid_values(self, fresh_app, draft, field):
        with pytest.raises(InvalidProduct) as exc_info:
            InventoryService.create_product(draft)

        assert exc_info.value.field == field

    def test_list_excludes_deleted_products(self, init_database):
        codes = [product.product_code for product in InventoryService.list_products()]

        assert codes == ['VGS-0001', 'VGS-0002', 'VGS-0003']

    @pytest.mark.parametrize('term,expected', [
        ('transformer', ['VGS-0001']),
        ('vgs-0002', ['VGS-0002']),
        ('healthcare', ['VGS-0003']),
        ('zzz', []),
    ])
    def test_search(self, init_database, term, expected):
        """Test search matches name, product code or type, ignoring case"""
        codes = [product.product_code for product in InventoryService.list_products(term)]

        assert codes == expected

    def test_delete_is_soft(self, transformer):
        InventoryService.delete_product(transformer.id)

        assert db.session.get(Product, transformer.id).is_active is False
        with pytest.raises(ProductNotFound):
            InventoryService.get_product(transformer.id)

    @pytest.mark.parametrize('key', ['999', 'abc', None])
    def test_get_unknown_product(self, init_database, key):
        with pytest.raises(ProductNotFound) as exc_info:
            InventoryService.get_product(key)

        assert exc_info.value.status_code == 404

    def test_update_quantity_records_adjustment(self, transformer):
        InventoryService.update_quantity(transformer.id, 7)

        assert transformer.quantity == 7
        movement = StockMovement.query.filter_by(
            product_id=transformer.id, movement_type=MOVEMENT_ADJUSTMENT
        ).one()
        assert movement.quantity == -3

    def test_update_quantity_rejects_negative(self, transformer):
        with pytest.raises(InvalidProduct):
            InventoryService.update_quantity(transformer.id, -1)

        assert transformer.quantity == 10


# ============================================================================
# GATE PASS SERVICE
# ============================================================================

class TestGatePassService:
    """Test issuing gate passes against stock"""

    def test_issue_deducts_stock(self, transformer, cylinder):
        gate_pass = GatePassService.create_gate_pass(
            make_submission(('VGS-0001', 4), ('VGS-0002', 5))
        )

        assert transformer.quantity == 6
        assert cylinder.quantity == 0
        assert gate_pass.total_quantity == 9
        assert [item.line_number for item in gate_pass.items] == [1, 2]

    def test_issue_records_movements(self, transformer):
        gate_pass = GatePassService.create_gate_pass(make_submission(('VGS-0001', 4)))

        movement = StockMovement.query.filter_by(movement_type=MOVEMENT_GATE_PASS).one()
        assert movement.quantity == -4
        assert movement.reference == gate_pass.gate_pass_number

    def test_number_and_timestamp_assigned(self, transformer):
        first = GatePassService.create_gate_pass(make_submission(('VGS-0001', 1)))
        second = GatePassService.create_gate_pass(make_submission(('VGS-0001', 1)))

        today = datetime.utcnow().strftime('%Y%m%d')
        assert first.gate_pass_number == f'GP-{today}-001'
        assert second.gate_pass_number == f'GP-{today}-002'
        assert first.generated_at is not None

    def test_insufficient_stock_writes_nothing(self, transformer, cylinder):
        """Test one short line rejects the whole gate pass"""
        with pytest.raises(InsufficientStock) as exc_info:
            GatePassService.create_gate_pass(
                make_submission(('VGS-0001', 4), ('VGS-0002', 6))
            )

        assert exc_info.value.status_code == 409
        assert transformer.quantity == 10
        assert cylinder.quantity == 5
        assert GatePass.query.count() == 0

    def test_repeated_lines_are_checked_together(self, transformer):
        """Test two lines for one product are summed against stock"""
        with pytest.raises(InsufficientStock):
            GatePassService.create_gate_pass(
                make_submission(('VGS-0001', 6), ('VGS-0001', 6))
            )

    def test_unknown_product(self, init_database):
        with pytest.raises(ProductNotFound):
            GatePassService.create_gate_pass(make_submission(('NOPE-1', 1)))

    def test_deleted_product_cannot_ship(self, init_database):
        with pytest.raises(ProductNotFound):
            GatePassService.create_gate_pass(make_submission(('VGS-0004', 1)))

    @pytest.mark.parametrize('submission,error', [
        (make_submission(), EmptySelection),
        (make_submission(('VGS-0001', 1), to=' '), MissingDestination),
        (make_submission(('VGS-0001', 1), prepared_by=''), MissingPreparer),
        (make_submission(('VGS-0001', 0)), InvalidQuantity),
    ])
    def test_incomplete_submissions(self, init_database, submission, error):
        with pytest.raises(error):
            GatePassService.create_gate_pass(submission)

        assert GatePass.query.count() == 0

    @pytest.mark.parametrize('products', [
        ['VGS-0001'],
        'abc',
        [{'productId': 'VGS-0001', 'selectedQuantity': 1}, 7],
        {'productId': 'VGS-0001', 'selectedQuantity': 1},
    ])
    def test_malformed_lines(self, transformer, products):
        """Test products must be a list of line objects"""
        submission = make_submission()
        submission['products'] = products

        with pytest.raises(InvalidProduct) as exc_info:
            GatePassService.create_gate_pass(submission)

        assert exc_info.value.field == 'products'
        assert transformer.quantity == 10
        assert GatePass.query.count() == 0

    def test_token_recorded(self, transformer):
        submission = make_submission(('VGS-0001', 1))
        submission['submitToken'] = 'form-token-1'

        gate_pass = GatePassService.create_gate_pass(submission)

        assert gate_pass.submit_token == 'form-token-1'
        assert GatePassService.find_by_token('form-token-1') is gate_pass

    def test_repeated_token_is_rejected(self, transformer):
        """Test a second submission of the same form writes nothing"""
        submission = make_submission(('VGS-0001', 4))
        submission['submitToken'] = 'form-token-1'
        first = GatePassService.create_gate_pass(submission)

        with pytest.raises(DuplicateSubmission) as exc_info:
            GatePassService.create_gate_pass(dict(submission))

        assert exc_info.value.status_code == 409
        assert exc_info.value.gate_pass_number == first.gate_pass_number
        assert transformer.quantity == 6
        assert GatePass.query.count() == 1

    def test_submissions_without_token_are_independent(self, transformer):
        GatePassService.create_gate_pass(make_submission(('VGS-0001', 1)))
        GatePassService.create_gate_pass(make_submission(('VGS-0001', 1)))

        assert GatePass.query.count() == 2

    def test_list_newest_first(self, transformer):
        first = GatePassService.create_gate_pass(make_submission(('VGS-0001', 1)))
        second = GatePassService.create_gate_pass(make_submission(('VGS-0001', 1)))

        assert [gp.id for gp in GatePassService.list_gate_passes()] == [second.id, first.id]

    def test_get_unknown_gate_pass(self, init_database):
        with pytest.raises(StoreError) as exc_info:
            GatePassService.get_gate_pass(42)

        assert exc_info.value.status_code == 404
