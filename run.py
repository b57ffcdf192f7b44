"""
Application Entry Point
Initializes and runs the gate pass application
"""

import os
import logging

import click

from gatepass import create_app, db

# Determine configuration environment
config_name = os.environ.get('FLASK_ENV', 'development')
app = create_app(config_name)

# Setup logging
if not os.path.exists(app.config['LOG_FOLDER']):
    os.makedirs(app.config['LOG_FOLDER'])

logging.basicConfig(
    level=getattr(logging, app.config['LOG_LEVEL'].upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(os.path.join(app.config['LOG_FOLDER'], 'app.log')),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger(__name__)

SAMPLE_PRODUCTS = [
    {'name': 'Current Transformer 400kV', 'transport': 'Road', 'quantity': 6,
     'from': 'Hyderabad GIS', 'type': 'Electronics',
     'description': 'Spare CT for bay extension'},
    {'name': 'Disconnector Drive Mechanism', 'transport': 'Road', 'quantity': 4,
     'from': 'Central Stores', 'type': 'Industrial'},
    {'name': 'SF6 Gas Cylinder', 'transport': 'Rail', 'quantity': 20,
     'from': 'Visakhapatnam', 'type': 'Industrial', 'remarks': 'Handle with care'},
    {'name': 'Control Cable 4C x 2.5 sq.mm', 'transport': 'Road', 'quantity': 12,
     'from': 'Central Stores', 'type': 'Electronics', 'description': 'Drums of 500 m'},
    {'name': 'First Aid Kit', 'transport': 'Road', 'quantity': 10,
     'from': 'Rajahmundry', 'type': 'Healthcare'},
]


@app.shell_context_processor
def make_shell_context():
    """Make database and models available in Flask shell"""
    from gatepass import models
    return {
        'db': db,
        'Product': models.Product,
        'GatePass': models.GatePass,
        'GatePassItem': models.GatePassItem,
        'StockMovement': models.StockMovement,
        'ErrorLog': models.ErrorLog
    }


@app.cli.command()
def init_db():
    """Initialize the database tables"""
    logger.info("Initializing database...")
    db.create_all()
    logger.info("Database initialized successfully!")


@app.cli.command()
@click.option('--force', is_flag=True, help='Add the sample stock even if products exist')
def seed_products(force):
    """Create sample substation stock"""
    from gatepass.models import Product
    from gatepass.services.inventory_service import InventoryService

    db.create_all()
    if Product.query.count() and not force:
        logger.info("Products already exist, skipping (use --force to add anyway)")
        return

    for draft in SAMPLE_PRODUCTS:
        product = InventoryService.create_product(draft)
        logger.info(f"Created {product.product_code} {product.name}")
    logger.info(f"{len(SAMPLE_PRODUCTS)} sample products created")


if __name__ == '__main__':
    # Check if running in development mode
    is_dev = os.environ.get('FLASK_ENV', 'development') == 'development'
    use_reloader = os.environ.get('FLASK_USE_RELOADER', 'true').lower() == 'true'

    with app.app_context():
        # Create tables if they don't exist
        db.create_all()
        logger.info("Database tables created")

    logger.info(f"Starting {app.config['SITE_NAME']} gate pass system "
                f"(store backend: {app.config['STORE_BACKEND']})...")
    logger.info(f"Debug mode: {is_dev}, Auto-reload: {use_reloader}")

    app.run(
        host='0.0.0.0',
        port=int(os.environ.get('PORT', 5000)),
        debug=is_dev,
        use_reloader=use_reloader
    )
