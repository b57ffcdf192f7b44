"""
Inventory and gate pass stores.

The UI talks to two collaborators: an inventory store (products) and a gate
pass store (issued gate passes). Both sit on a backend that speaks the JSON
resource shapes, either the local database or a remote server over HTTP,
chosen with the STORE_BACKEND setting.
"""

from typing import Dict, List

from flask import current_app, g

from gatepass.core.records import GatePassRecord, ProductSnapshot
from gatepass.exceptions import ProductNotFound
from gatepass.services.api_client import GatePassAPIClient
from gatepass.services.gate_pass_service import GatePassService
from gatepass.services.inventory_service import InventoryService



class DatabaseBackend:
    """Resource operations served from the local database"""

    def get_products(self):
        return [product.to_dict() for product in InventoryService.list_products()]

    def create_product(self, draft):
        return InventoryService.create_product(draft).to_dict()

    def delete_product(self, product_key):
        product = InventoryService.delete_product(product_key)
        return {'message': 'Product deleted', '_id': str(product.id)}

    def update_quantity(self, product_key, quantity):
        return InventoryService.update_quantity(product_key, quantity).to_dict()

    def get_gate_passes(self):
        return [gate_pass.to_dict() for gate_pass in GatePassService.list_gate_passes()]

    def create_gate_pass(self, submission):
        return GatePassService.create_gate_pass(submission).to_dict()

    def get_gate_pass(self, gate_pass_key):
        return GatePassService.get_gate_pass(gate_pass_key).to_dict()


class InventoryStore:
    """Products collaborator"""

    def __init__(self, backend):
        self.backend = backend

    def list(self, search: str = None) -> List[ProductSnapshot]:
        products = [ProductSnapshot.from_dict(item) for item in self.backend.get_products() or []]
        if search:
            products = [product for product in products if product.matches(search)]
        return products

    def get(self, product_key) -> ProductSnapshot:
        """
        Fresh snapshot of one product.

        The resources have no single-product read, so this lists and picks.
        """
        for product in self.list():
            if product.key == str(product_key):
                return product
        raise ProductNotFound(product_key)

    def create(self, draft: Dict) -> ProductSnapshot:
        return ProductSnapshot.from_dict(self.backend.create_product(draft))

    def delete(self, product_key):
        return self.backend.delete_product(product_key)

    def update_quantity(self, product_key, quantity) -> ProductSnapshot:
        return ProductSnapshot.from_dict(self.backend.update_quantity(product_key, quantity))


class GatePassStore:
    """Gate passes collaborator"""

    def __init__(self, backend):
        self.backend = backend

    def list(self) -> List[GatePassRecord]:
        return [GatePassRecord.from_dict(item) for item in self.backend.get_gate_passes() or []]

    def get(self, gate_pass_key) -> GatePassRecord:
        return GatePassRecord.from_dict(self.backend.get_gate_pass(gate_pass_key))

    def create(self, submission: Dict) -> GatePassRecord:
        return GatePassRecord.from_dict(self.backend.create_gate_pass(submission))


def make_backend(app=None):
    """Build the backend named by STORE_BACKEND ('database' or 'http')"""
    app = app or current_app
    backend_name = (app.config.get('STORE_BACKEND') or 'database').lower()

    if backend_name == 'http':
        return GatePassAPIClient(
            base_url=app.config.get('GATEPASS_API_URL'),
            timeout=app.config.get('GATEPASS_API_TIMEOUT')
        )
    if backend_name == 'database':
        return DatabaseBackend()

    raise ValueError(f"Unknown STORE_BACKEND: {backend_name}")


def get_stores():
    """
    Inventory and gate pass stores for the current request

    Returns:
        tuple: (InventoryStore, GatePassStore)
    """
    if 'gatepass_stores' not in g:
        backend = make_backend()
        g.gatepass_stores = (InventoryStore(backend), GatePassStore(backend))
    return g.gatepass_stores
