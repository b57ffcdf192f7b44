"""
Gate Pass API Client
HTTP client for a remote inventory / gate pass server exposing the
products and gatepasses resources as JSON.
"""

import logging

import requests
from flask import current_app, has_app_context

from gatepass.exceptions import StoreError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'http://localhost:5000/api'


class GatePassAPIClient:
    """
    Thin wrapper over the remote REST resources

        GET    /products                  list products
        POST   /products                  create a product
        DELETE /products/{id}             delete a product
        PATCH  /products/{id}/quantity    set available quantity
        GET    /gatepasses                list gate passes
        POST   /gatepasses                issue a gate pass
        GET    /gatepasses/{id}           fetch one gate pass

    Every method returns the decoded JSON body. Network failures, timeouts
    and non-2xx responses raise StoreError.
    """

    def __init__(self, base_url=None, timeout=None):
        """
        Initialize the client

        Args:
            base_url: API root, e.g. http://localhost:5000/api
            timeout: Seconds to wait for each request
        """
        if has_app_context():
            base_url = base_url or current_app.config.get('GATEPASS_API_URL')
            timeout = timeout or current_app.config.get('GATEPASS_API_TIMEOUT')
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip('/')
        self.timeout = timeout or 10

    def _get_headers(self):
        return {
            "Accept": "application/json",
            "Content-Type": "application/json"
        }

    def _request(self, method, path, payload=None):
        url = f"{self.base_url}{path}"

        try:
            response = requests.request(
                method,
                url,
                headers=self._get_headers(),
                json=payload,
                timeout=self.timeout
            )
        except requests.exceptions.Timeout:
            logger.warning(f"{method} {url} timed out after {self.timeout}s")
            raise StoreError(f'Request timeout ({method} {path})')
        except requests.exceptions.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise StoreError(f'Could not reach the gate pass server: {e}')

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            message = body.get('message') or body.get('error') or f'HTTP {response.status_code}'
            # {"error": CODE, "message": text} is our own error shape
            error_code = body.get('error') if body.get('message') else None
            logger.warning(f"{method} {url} returned {response.status_code}: {message}")
            raise StoreError(message, status_code=response.status_code, error_code=error_code)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError:
            raise StoreError(f'Invalid JSON from {method} {path}', status_code=response.status_code)

    # Products

    def get_products(self):
        return self._request('GET', '/products')

    def create_product(self, draft):
        return self._request('POST', '/products', draft)

    def delete_product(self, product_key):
        return self._request('DELETE', f'/products/{product_key}')

    def update_quantity(self, product_key, quantity):
        return self._request('PATCH', f'/products/{product_key}/quantity', {'quantity': quantity})

    # Gate passes

    def get_gate_passes(self):
        return self._request('GET', '/gatepasses')

    def create_gate_pass(self, submission):
        return self._request('POST', '/gatepasses', submission)

    def get_gate_pass(self, gate_pass_key):
        return self._request('GET', f'/gatepasses/{gate_pass_key}')
