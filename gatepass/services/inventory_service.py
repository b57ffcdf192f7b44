"""
Inventory Service
Products resource backed by the local database: list, create, delete and
quantity updates, with a stock movement recorded for every change.
"""

import logging
from typing import Dict, List, Optional

from flask import current_app

from gatepass.constants import (
    DEFAULT_PRODUCT_TYPE, DEFAULT_TRANSPORT, MOVEMENT_ADJUSTMENT,
    MOVEMENT_RECEIPT, PRODUCT_TYPES, TRANSPORT_MODES
)
from gatepass.exceptions import InvalidProduct, ProductNotFound
from gatepass.models import db, Product, StockMovement
from gatepass.utils.helpers import generate_product_code, parse_non_negative_int

logger = logging.getLogger(__name__)


class InventoryService:
    """Service for managing substation stock"""

    @staticmethod
    def normalize_draft(data: Optional[Dict]) -> Dict:
        """
        Validate a product draft and fill in defaults

        Args:
            data: Draft in the products resource shape (name, transport,
                description, quantity, from, to, type, remarks)

        Returns:
            Dict of model field values

        Raises:
            InvalidProduct: required field missing or value not allowed
        """
        data = data or {}
        name = (data.get('name') or '').strip()
        from_location = (data.get('from') or '').strip()
        raw_quantity = data.get('quantity')

        if not name or raw_quantity in (None, '') or not from_location:
            raise InvalidProduct('Please fill in all required fields (Name, Quantity, From)')

        quantity = parse_non_negative_int(raw_quantity)
        if quantity is None:
            raise InvalidProduct('Quantity must be a whole number of zero or more', field='quantity')

        transport = (data.get('transport') or DEFAULT_TRANSPORT).strip()
        if transport not in TRANSPORT_MODES:
            raise InvalidProduct(f'Unknown mode of transport: {transport}', field='transport')

        product_type = (data.get('type') or DEFAULT_PRODUCT_TYPE).strip()
        if product_type not in PRODUCT_TYPES:
            raise InvalidProduct(f'Unknown product type: {product_type}', field='type')

        return {
            'name': name,
            'transport': transport,
            'description': (data.get('description') or '').strip(),
            'quantity': quantity,
            'from_location': from_location,
            'to_location': (data.get('to') or '').strip() or current_app.config.get('SITE_NAME', ''),
            'product_type': product_type,
            'remarks': (data.get('remarks') or '').strip(),
        }

    @staticmethod
    def list_products(search: Optional[str] = None) -> List[Product]:
        """Active products, optionally filtered by name, code or type"""
        query = Product.query.filter(Product.is_active == True)

        search = (search or '').strip()
        if search:
            query = query.filter(
                db.or_(
                    Product.name.ilike(f'%{search}%'),
                    Product.product_code.ilike(f'%{search}%'),
                    Product.product_type.ilike(f'%{search}%')
                )
            )

        return query.order_by(Product.id).all()

    @staticmethod
    def get_product(product_key) -> Product:
        """Look up an active product by its store key"""
        try:
            product_id = int(product_key)
        except (TypeError, ValueError):
            raise ProductNotFound(product_key)

        product = db.session.get(Product, product_id)
        if product is None or not product.is_active:
            raise ProductNotFound(product_key)
        return product

    @staticmethod
    def find_by_code(product_code: str) -> Optional[Product]:
        return Product.query.filter_by(product_code=product_code, is_active=True).first()

    @staticmethod
    def create_product(data: Dict) -> Product:
        """Create a product from a draft and record the opening stock"""
        fields = InventoryService.normalize_draft(data)
        prefix = current_app.config.get('PRODUCT_CODE_PREFIX', 'VGS')

        try:
            product = Product(product_code=generate_product_code(prefix), **fields)
            db.session.add(product)
            db.session.flush()

            if product.quantity:
                db.session.add(StockMovement(
                    product_id=product.id,
                    movement_type=MOVEMENT_RECEIPT,
                    quantity=product.quantity,
                    reference=product.product_code,
                    notes=f'Opening stock from {product.from_location}'
                ))

            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"Product {product.product_code} created with quantity {product.quantity}")
        return product

    @staticmethod
    def delete_product(product_key) -> Product:
        """Soft delete - the product disappears from listings, history keeps its code"""
        product = InventoryService.get_product(product_key)
        try:
            product.is_active = False
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"Product {product.product_code} deleted")
        return product

    @staticmethod
    def update_quantity(product_key, quantity) -> Product:
        """Set the available quantity of a product"""
        new_quantity = parse_non_negative_int(quantity)
        if new_quantity is None:
            raise InvalidProduct('Quantity must be a whole number of zero or more', field='quantity')

        product = InventoryService.get_product(product_key)
        old_quantity = product.quantity or 0

        try:
            product.quantity = new_quantity
            if new_quantity != old_quantity:
                db.session.add(StockMovement(
                    product_id=product.id,
                    movement_type=MOVEMENT_ADJUSTMENT,
                    quantity=new_quantity - old_quantity,
                    reference='STOCK_ADJUSTMENT',
                    notes=f'Old: {old_quantity}, New: {new_quantity}'
                ))
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(f"Product {product.product_code} quantity {old_quantity} -> {new_quantity}")
        return product
