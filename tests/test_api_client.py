"""
Tests for the HTTP store backend

Tests cover:
- Request shapes for every resource call
- Timeout, connection and server errors mapped to StoreError
- Stores converting JSON into snapshots and records
- Selecting the backend from configuration
"""

import pytest
import requests
from unittest.mock import MagicMock, patch

from gatepass.core.assembler import GatePassAssembler, GatePassMetadata
from gatepass.exceptions import ProductNotFound, StoreError, SubmissionFailed
from gatepass.services.api_client import GatePassAPIClient
from gatepass.services.stores import (
    DatabaseBackend, GatePassStore, InventoryStore, get_stores, make_backend
)


# ============================================================================
# Fixtures
# ============================================================================

PRODUCT_JSON = {
    '_id': '64f0c0ffee', 'productId': 'P1', 'name': 'Current Transformer',
    'transport': 'Road', 'description': '', 'quantity': 10, 'from': 'Hyderabad GIS',
    'to': 'Vemagiri GIS', 'type': 'Electronics', 'remarks': ''
}


def make_response(status_code=200, payload=None, content=b'{}'):
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def api_client():
    return GatePassAPIClient(base_url='http://store.local/api/', timeout=5)


@pytest.fixture
def mock_request():
    with patch('gatepass.services.api_client.requests.request') as mocked:
        yield mocked


# ============================================================================
# CLIENT
# ============================================================================

class TestGatePassAPIClient:
    """Test the REST calls"""

    def test_get_products(self, api_client, mock_request):
        mock_request.return_value = make_response(payload=[PRODUCT_JSON])

        result = api_client.get_products()

        assert result == [PRODUCT_JSON]
        args, kwargs = mock_request.call_args
        assert args == ('GET', 'http://store.local/api/products')
        assert kwargs['timeout'] == 5
        assert kwargs['json'] is None

    @pytest.mark.parametrize('call,method,url,payload', [
        (lambda c: c.create_product({'name': 'X'}), 'POST', '/products', {'name': 'X'}),
        (lambda c: c.delete_product('abc'), 'DELETE', '/products/abc', None),
        (lambda c: c.update_quantity('abc', 3), 'PATCH', '/products/abc/quantity', {'quantity': 3}),
        (lambda c: c.get_gate_passes(), 'GET', '/gatepasses', None),
        (lambda c: c.create_gate_pass({'to': 'X'}), 'POST', '/gatepasses', {'to': 'X'}),
        (lambda c: c.get_gate_pass('g1'), 'GET', '/gatepasses/g1', None),
    ])
    def test_resource_calls(self, api_client, mock_request, call, method, url, payload):
        mock_request.return_value = make_response(payload={})

        call(api_client)

        args, kwargs = mock_request.call_args
        assert args == (method, f'http://store.local/api{url}')
        assert kwargs['json'] == payload

    def test_timeout_raises_store_error(self, api_client, mock_request):
        mock_request.side_effect = requests.exceptions.Timeout()

        with pytest.raises(StoreError) as exc_info:
            api_client.create_gate_pass({})

        assert 'timeout' in str(exc_info.value).lower()

    def test_connection_error_raises_store_error(self, api_client, mock_request):
        mock_request.side_effect = requests.exceptions.ConnectionError('refused')

        with pytest.raises(StoreError) as exc_info:
            api_client.get_products()

        assert 'refused' in str(exc_info.value)

    def test_error_body_is_reported(self, api_client, mock_request):
        mock_request.return_value = make_response(
            409, {'error': 'INSUFFICIENT_STOCK', 'message': 'Insufficient stock for P1'}
        )

        with pytest.raises(StoreError) as exc_info:
            api_client.create_gate_pass({})

        assert exc_info.value.status_code == 409
        assert exc_info.value.code == 'INSUFFICIENT_STOCK'
        assert str(exc_info.value) == 'Insufficient stock for P1'

    def test_plain_error_body(self, api_client, mock_request):
        mock_request.return_value = make_response(500, ValueError('no json'), content=b'oops')

        with pytest.raises(StoreError) as exc_info:
            api_client.get_products()

        assert exc_info.value.status_code == 500
        assert exc_info.value.code == 'STORE_ERROR'
        assert str(exc_info.value) == 'HTTP 500'

    def test_empty_success_body(self, api_client, mock_request):
        mock_request.return_value = make_response(204, content=b'')

        assert api_client.delete_product('abc') is None

    def test_defaults_from_config(self, fresh_app):
        fresh_app.config['GATEPASS_API_URL'] = 'http://remote/api'
        fresh_app.config['GATEPASS_API_TIMEOUT'] = 2.5

        client = GatePassAPIClient()

        assert client.base_url == 'http://remote/api'
        assert client.timeout == 2.5


# ============================================================================
# STORES
# ============================================================================

class TestStores:
    """Test the collaborators on top of a backend"""

    def test_inventory_list_and_search(self):
        backend = MagicMock()
        backend.get_products.return_value = [
            PRODUCT_JSON, dict(PRODUCT_JSON, _id='2', productId='P2', name='Clamp', type='Industrial')
        ]
        store = InventoryStore(backend)

        assert [p.product_id for p in store.list()] == ['P1', 'P2']
        assert [p.product_id for p in store.list('industrial')] == ['P2']

    def test_inventory_get(self):
        backend = MagicMock()
        backend.get_products.return_value = [PRODUCT_JSON]
        store = InventoryStore(backend)

        product = store.get('64f0c0ffee')

        assert product.quantity == 10
        assert product.from_location == 'Hyderabad GIS'
        with pytest.raises(ProductNotFound):
            store.get('missing')

    def test_gate_pass_create_returns_record(self):
        backend = MagicMock()
        backend.create_gate_pass.return_value = {
            '_id': 'g1', 'gatePassNumber': 'GP-20261018-001', 'date': '18/10/2026',
            'to': 'Hyderabad GIS', 'preparedBy': 'A. Rao',
            'products': [{'productId': 'P1', 'selectedQuantity': 4}]
        }

        record = GatePassStore(backend).create({'to': 'Hyderabad GIS'})

        assert record.key == 'g1'
        assert record.total_quantity == 4

    def test_http_timeout_during_commit_is_submission_failed(self, api_client, mock_request):
        """Test a timed-out create leaves the assembler ready to retry"""
        inventory = InventoryStore(api_client)
        gate_passes = GatePassStore(api_client)
        assembler = GatePassAssembler(metadata=GatePassMetadata('Hyderabad GIS', 'A. Rao'))
        mock_request.side_effect = [make_response(payload=[PRODUCT_JSON]), requests.exceptions.Timeout()]
        assembler.add_selection(inventory.get('64f0c0ffee'), 4)

        with pytest.raises(SubmissionFailed):
            assembler.submit(gate_passes.create, inventory.list, gate_passes.list)

        assert len(assembler.ledger) == 1
        assert assembler.metadata.destination == 'Hyderabad GIS'


class TestBackendSelection:
    """Test STORE_BACKEND handling"""

    def test_database_backend(self, fresh_app):
        assert isinstance(make_backend(fresh_app), DatabaseBackend)

    def test_http_backend(self, fresh_app):
        fresh_app.config['STORE_BACKEND'] = 'http'

        backend = make_backend(fresh_app)

        assert isinstance(backend, GatePassAPIClient)

    def test_unknown_backend(self, fresh_app):
        fresh_app.config['STORE_BACKEND'] = 'carrier-pigeon'

        with pytest.raises(ValueError):
            make_backend(fresh_app)

    def test_stores_cached_per_context(self, fresh_app):
        with fresh_app.test_request_context('/'):
            assert get_stores() is get_stores()

    def test_invalid_backend_rejected_at_startup(self, app_factory, monkeypatch):
        from config import TestingConfig
        monkeypatch.setattr(TestingConfig, 'STORE_BACKEND', 'ftp')

        with pytest.raises(ValueError):
            app_factory()
