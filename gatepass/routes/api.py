"""
REST API Routes

JSON resources served from the local database:

    GET    /api/products
    POST   /api/products
    DELETE /api/products/<id>
    PATCH  /api/products/<id>/quantity
    GET    /api/gatepasses
    POST   /api/gatepasses
    GET    /api/gatepasses/<id>

Errors come back as {"error": CODE, "message": text}.
"""

import logging

from flask import Blueprint, jsonify, request

from gatepass.exceptions import GatePassError, StoreError
from gatepass.services.stores import DatabaseBackend

logger = logging.getLogger(__name__)

bp = Blueprint('api', __name__)

# The API always serves the local tables, whatever STORE_BACKEND the UI uses
backend = DatabaseBackend()


@bp.errorhandler(GatePassError)
def handle_gate_pass_error(error):
    if isinstance(error, StoreError):
        status_code = error.status_code or 502
    else:
        status_code = 400
    return jsonify(error.to_dict()), status_code


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    return data


@bp.route('/products', methods=['GET'])
def list_products():
    """List active products"""
    return jsonify(backend.get_products())


@bp.route('/products', methods=['POST'])
def create_product():
    """Create a product from a draft"""
    data = _json_body()
    if data is None:
        return jsonify({'error': 'BAD_REQUEST', 'message': 'Expected a JSON object'}), 400
    return jsonify(backend.create_product(data)), 201


@bp.route('/products/<product_id>', methods=['DELETE'])
def delete_product(product_id):
    """Delete a product"""
    return jsonify(backend.delete_product(product_id))


@bp.route('/products/<product_id>/quantity', methods=['PATCH'])
def update_quantity(product_id):
    """Set the available quantity of a product"""
    data = _json_body()
    if data is None or 'quantity' not in data:
        return jsonify({'error': 'BAD_REQUEST', 'message': 'quantity is required'}), 400
    return jsonify(backend.update_quantity(product_id, data['quantity']))


@bp.route('/gatepasses', methods=['GET'])
def list_gate_passes():
    """List gate passes, newest first"""
    return jsonify(backend.get_gate_passes())


@bp.route('/gatepasses', methods=['POST'])
def create_gate_pass():
    """Issue a gate pass and deduct the shipped stock"""
    data = _json_body()
    if data is None:
        return jsonify({'error': 'BAD_REQUEST', 'message': 'Expected a JSON object'}), 400
    gate_pass = backend.create_gate_pass(data)
    logger.info(f"API issued gate pass {gate_pass['gatePassNumber']}")
    return jsonify(gate_pass), 201


@bp.route('/gatepasses/<gate_pass_id>', methods=['GET'])
def get_gate_pass(gate_pass_id):
    """Fetch one gate pass"""
    return jsonify(backend.get_gate_pass(gate_pass_id))
