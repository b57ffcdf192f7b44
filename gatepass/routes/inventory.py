"""
Inventory Routes
Product table, product management and the transport selection
"""

import logging

from flask import Blueprint, render_template, request, redirect, url_for, flash, Response

from gatepass.core.records import InventorySummary
from gatepass.exceptions import GatePassError, SelectionError, StoreError
from gatepass.services.stores import get_stores
from gatepass.utils.codes import generate_barcode_svg, generate_qr_svg
from gatepass.utils.export import export_inventory_report
from gatepass.utils.session_state import load_assembler, save_assembler

logger = logging.getLogger(__name__)

bp = Blueprint('inventory', __name__)


def _back_to_index():
    return redirect(url_for('inventory.index', q=request.form.get('q') or None))


@bp.route('/')
def index():
    """Product table with search, headline stats and the current selection"""
    inventory_store, _ = get_stores()
    search = request.args.get('q', '').strip()

    try:
        all_products = inventory_store.list()
    except StoreError as e:
        logger.error(f"Error loading products: {e}")
        flash(f'Error loading products: {e}', 'danger')
        all_products = []

    products = [product for product in all_products if product.matches(search)]
    assembler = load_assembler()

    return render_template('inventory/index.html',
                           products=products,
                           search=search,
                           summary=InventorySummary.from_products(all_products),
                           ledger=assembler.ledger)


@bp.route('/products', methods=['POST'])
def create_product():
    """Add a product"""
    inventory_store, _ = get_stores()
    draft = {
        'name': request.form.get('name', ''),
        'transport': request.form.get('transport', ''),
        'description': request.form.get('description', ''),
        'quantity': request.form.get('quantity', ''),
        'from': request.form.get('from', ''),
        'to': request.form.get('to', ''),
        'type': request.form.get('type', ''),
        'remarks': request.form.get('remarks', ''),
    }

    try:
        product = inventory_store.create(draft)
        flash(f'Product {product.product_id} added successfully!', 'success')
    except GatePassError as e:
        flash(str(e), 'danger')

    return _back_to_index()


@bp.route('/products/<product_key>/delete', methods=['POST'])
def delete_product(product_key):
    """Delete a product and drop it from the selection"""
    inventory_store, _ = get_stores()

    try:
        inventory_store.delete(product_key)
    except GatePassError as e:
        flash(f'Error deleting product: {e}', 'danger')
        return _back_to_index()

    assembler = load_assembler()
    if product_key in assembler.ledger:
        assembler.remove_selection(product_key)
        save_assembler(assembler)

    flash('Product deleted successfully!', 'success')
    return _back_to_index()


@bp.route('/products/<product_key>/codes')
def product_codes(product_key):
    """QR and barcode placeholders for one product"""
    inventory_store, _ = get_stores()

    try:
        product = inventory_store.get(product_key)
    except StoreError as e:
        flash(str(e), 'danger')
        return redirect(url_for('inventory.index'))

    return render_template('inventory/codes.html',
                           product=product,
                           qr_svg=generate_qr_svg(product.product_id),
                           barcode_svg=generate_barcode_svg(product.product_id))


@bp.route('/products/export')
def export_products():
    """Download the stock list as Excel or CSV"""
    inventory_store, _ = get_stores()
    format_type = request.args.get('format', 'excel')

    try:
        products = inventory_store.list()
    except StoreError as e:
        flash(f'Error loading products: {e}', 'danger')
        return redirect(url_for('inventory.index'))

    if format_type == 'csv':
        output = export_inventory_report(products, 'csv')
        return Response(output.getvalue(), mimetype='text/csv',
                        headers={'Content-Disposition': 'attachment; filename=inventory.csv'})

    output = export_inventory_report(products, 'excel')
    return Response(output.getvalue(),
                    mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
                    headers={'Content-Disposition': 'attachment; filename=inventory.xlsx'})


@bp.route('/selection', methods=['POST'])
def add_selection():
    """Select a quantity of a product for transport"""
    inventory_store, _ = get_stores()
    product_key = request.form.get('product_key', '')

    # Cap against the stock as it is now, not as it was when the page loaded
    try:
        product = inventory_store.get(product_key)
    except StoreError as e:
        flash(str(e), 'danger')
        return _back_to_index()

    assembler = load_assembler()
    try:
        entry = assembler.add_selection(product, request.form.get('quantity', ''))
    except SelectionError as e:
        flash(str(e), 'warning')
        return _back_to_index()

    save_assembler(assembler)
    flash(f'{entry.selected_quantity} x {product.name} selected for transport', 'success')
    return _back_to_index()


@bp.route('/selection/<product_key>/remove', methods=['POST'])
def remove_selection(product_key):
    """Drop a product from the selection"""
    assembler = load_assembler()
    assembler.remove_selection(product_key)
    save_assembler(assembler)
    if request.form.get('next') == 'gatepass':
        return redirect(url_for('gatepasses.new'))
    return redirect(url_for('inventory.index'))


@bp.route('/selection/clear', methods=['POST'])
def clear_selection():
    """Cancel the gate pass being prepared"""
    assembler = load_assembler()
    assembler.cancel()
    save_assembler(assembler)
    flash('Selection cleared', 'info')
    return redirect(url_for('inventory.index'))
