"""
Database Models
SQLAlchemy ORM models backing the products and gatepasses resources
"""

from datetime import datetime
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class Product(db.Model):
    """Inventory item held at the substation"""
    __tablename__ = 'products'

    id = db.Column(db.Integer, primary_key=True)
    product_code = db.Column(db.String(64), unique=True, nullable=False, index=True)
    name = db.Column(db.String(256), nullable=False, index=True)
    transport = db.Column(db.String(32), nullable=False, default='Road')
    description = db.Column(db.Text)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    from_location = db.Column(db.String(128), nullable=False)
    to_location = db.Column(db.String(128))
    product_type = db.Column(db.String(64), nullable=False, default='Electronics')
    remarks = db.Column(db.Text)
    is_active = db.Column(db.Boolean, default=True)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    stock_movements = db.relationship('StockMovement', backref='product', lazy='dynamic')

    def to_dict(self):
        """Serialize in the products resource shape"""
        return {
            '_id': str(self.id),
            'productId': self.product_code,
            'name': self.name,
            'transport': self.transport,
            'description': self.description or '',
            'quantity': self.quantity or 0,
            'from': self.from_location,
            'to': self.to_location or '',
            'type': self.product_type,
            'remarks': self.remarks or '',
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Product {self.product_code}>'


class GatePass(db.Model):
    """Issued gate pass authorizing items to leave the site"""
    __tablename__ = 'gate_passes'

    id = db.Column(db.Integer, primary_key=True)
    gate_pass_number = db.Column(db.String(64), unique=True, nullable=False, index=True)
    date = db.Column(db.String(16), nullable=False)  # As printed, e.g. 18/10/2026
    destination = db.Column(db.String(256), nullable=False)
    prepared_by = db.Column(db.String(128), nullable=False)
    checked_by = db.Column(db.String(128))
    authorized_by = db.Column(db.String(128))
    generated_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    # One-time token of the form that produced this gate pass
    submit_token = db.Column(db.String(64), unique=True, index=True)

    # Relationships
    items = db.relationship('GatePassItem', backref='gate_pass', lazy='select',
                            order_by='GatePassItem.line_number',
                            cascade='all, delete-orphan')

    @property
    def total_quantity(self):
        return sum(item.selected_quantity for item in self.items)

    def to_dict(self):
        """Serialize in the gatepasses resource shape"""
        return {
            '_id': str(self.id),
            'gatePassNumber': self.gate_pass_number,
            'date': self.date,
            'to': self.destination,
            'products': [item.to_dict() for item in self.items],
            'preparedBy': self.prepared_by,
            'checkedBy': self.checked_by or '',
            'authorizedBy': self.authorized_by or '',
            'generatedAt': self.generated_at.isoformat() if self.generated_at else None,
        }

    def __repr__(self):
        return f'<GatePass {self.gate_pass_number}>'


class GatePassItem(db.Model):
    """Product line on a gate pass, copied from the product at issue time"""
    __tablename__ = 'gate_pass_items'

    id = db.Column(db.Integer, primary_key=True)
    gate_pass_id = db.Column(db.Integer, db.ForeignKey('gate_passes.id'), nullable=False)
    line_number = db.Column(db.Integer, nullable=False)

    product_code = db.Column(db.String(64), nullable=False, index=True)
    name = db.Column(db.String(256), nullable=False)
    transport = db.Column(db.String(32))
    description = db.Column(db.Text)
    selected_quantity = db.Column(db.Integer, nullable=False)
    product_type = db.Column(db.String(64))
    remarks = db.Column(db.Text)

    def to_dict(self):
        return {
            'productId': self.product_code,
            'name': self.name,
            'transport': self.transport or '',
            'description': self.description or '',
            'selectedQuantity': self.selected_quantity,
            'type': self.product_type or '',
            'remarks': self.remarks or '',
        }

    def __repr__(self):
        return f'<GatePassItem {self.product_code} x {self.selected_quantity}>'


class StockMovement(db.Model):
    """Track all stock movements (receipt/adjustment/gate pass)"""
    __tablename__ = 'stock_movements'

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False)

    movement_type = db.Column(db.String(32), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)  # Positive for in, negative for out
    reference = db.Column(db.String(128))  # Gate pass number etc.
    notes = db.Column(db.Text)

    timestamp = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f'<StockMovement {self.movement_type} - {self.quantity}>'


class ErrorLog(db.Model):
    """Unhandled application error and the product or gate pass it concerned"""
    __tablename__ = 'error_logs'

    id = db.Column(db.Integer, primary_key=True)
    timestamp = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    error_type = db.Column(db.String(128), nullable=False, index=True)
    error_message = db.Column(db.Text, nullable=False)
    traceback = db.Column(db.Text)
    status_code = db.Column(db.Integer)

    # Request
    request_method = db.Column(db.String(10))
    request_url = db.Column(db.String(512))
    endpoint = db.Column(db.String(128))
    form_data = db.Column(db.Text)  # JSON, tokens redacted

    # Resource the request was about: 'product' or 'gatepass' and its key
    resource_type = db.Column(db.String(16))
    resource_key = db.Column(db.String(64), index=True)

    def __repr__(self):
        return f'<ErrorLog {self.error_type} {self.resource_type or ""}:{self.resource_key or ""}>'
