"""
Helper Utilities
Common utility functions used across the application
"""

from datetime import datetime


def generate_product_code(prefix='VGS'):
    """
    Generate the next product code

    Format: PREFIX-NNNN, numbered across all products ever created
    (deleted ones included) so codes are never reused.

    Returns:
        str: Product code
    """
    from gatepass.models import Product

    last_product = Product.query.filter(
        Product.product_code.like(f"{prefix}-%")
    ).order_by(Product.id.desc()).first()

    next_num = 1
    if last_product:
        try:
            next_num = int(last_product.product_code.split('-')[-1]) + 1
        except ValueError:
            next_num = Product.query.count() + 1

    code = f"{prefix}-{next_num:04d}"
    while Product.query.filter_by(product_code=code).first():
        next_num += 1
        code = f"{prefix}-{next_num:04d}"
    return code


def generate_gate_pass_number(prefix='GP'):
    """
    Generate a unique gate pass number.

    Returns:
        String like "GP-20261018-001"
    """
    from gatepass.models import GatePass

    today = datetime.utcnow().strftime('%Y%m%d')
    day_prefix = f"{prefix}-{today}-"

    # Latest row, not the highest string: "-1000" sorts before "-999"
    last_pass = GatePass.query.filter(
        GatePass.gate_pass_number.like(f"{day_prefix}%")
    ).order_by(GatePass.id.desc()).first()

    if last_pass:
        try:
            last_num = int(last_pass.gate_pass_number.split('-')[-1])
            new_num = last_num + 1
        except ValueError:
            new_num = 1
    else:
        new_num = 1

    return f"{day_prefix}{new_num:03d}"


def parse_non_negative_int(value):
    """
    Parse a stock quantity from a form field or JSON value

    Returns:
        int or None if the value is not a whole number >= 0
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str):
        value = value.strip()
        if value.isascii() and value.isdigit():
            return int(value)
    return None


def format_datetime(value, format_str='%d/%m/%Y %H:%M'):
    """
    Format a datetime or ISO-8601 string for display

    Args:
        value: datetime, ISO string or None
        format_str: strftime format

    Returns:
        str: Formatted value, '' when empty
    """
    if not value:
        return ''
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return value
    return value.strftime(format_str)
