"""
Shared pytest fixtures and configuration for all tests.

Provides the Flask application, a clean in-memory database per test, a test
client and seeded substation stock.
"""

import pytest
import sys
import os

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gatepass import create_app
from gatepass.core.records import ProductSnapshot
from gatepass.models import db


@pytest.fixture(scope='session')
def app_factory():
    """Factory fixture for creating test app instances."""
    def _create_app(config='testing'):
        app = create_app(config)
        app.config['WTF_CSRF_ENABLED'] = False
        app.config['SERVER_NAME'] = 'localhost'
        app.config['TESTING'] = True
        app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite:///:memory:'
        app.config['ITEMS_PER_PAGE'] = 20
        return app
    return _create_app


@pytest.fixture(scope='session')
def app(app_factory):
    """Create application for testing session."""
    return app_factory()


@pytest.fixture(scope='function')
def fresh_app(app_factory):
    """Create a fresh application for each test with clean database."""
    app = app_factory()

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(fresh_app):
    """Create a test client for each test."""
    return fresh_app.test_client()


@pytest.fixture(scope='function')
def db_session(fresh_app):
    """Provide a database session for testing."""
    with fresh_app.app_context():
        yield db.session
        db.session.rollback()


@pytest.fixture(scope='function')
def init_database(fresh_app):
    """
    Initialize database with substation stock.

    Creates:
    - VGS-0001 Current Transformer, 10 in stock
    - VGS-0002 SF6 Gas Cylinder, 5 in stock
    - VGS-0003 First Aid Kit, 0 in stock
    - VGS-0004 Old Relay Panel (deleted)
    """
    from gatepass.models import Product

    with fresh_app.app_context():
        products = [
            Product(
                product_code='VGS-0001',
                name='Current Transformer',
                transport='Road',
                description='400kV CT spare',
                quantity=10,
                from_location='Hyderabad GIS',
                to_location='Vemagiri GIS',
                product_type='Electronics',
                remarks='Fragile'
            ),
            Product(
                product_code='VGS-0002',
                name='SF6 Gas Cylinder',
                transport='Rail',
                quantity=5,
                from_location='Visakhapatnam',
                to_location='Vemagiri GIS',
                product_type='Industrial'
            ),
            Product(
                product_code='VGS-0003',
                name='First Aid Kit',
                transport='Road',
                quantity=0,
                from_location='Rajahmundry',
                to_location='Vemagiri GIS',
                product_type='Healthcare'
            ),
            Product(
                product_code='VGS-0004',
                name='Old Relay Panel',
                transport='Road',
                quantity=3,
                from_location='Central Stores',
                to_location='Vemagiri GIS',
                product_type='Electronics',
                is_active=False
            ),
        ]
        db.session.add_all(products)
        db.session.commit()

        yield {product.product_code: product for product in products}


@pytest.fixture
def transformer(init_database):
    """The 10-unit Current Transformer product row."""
    return init_database['VGS-0001']


@pytest.fixture
def cylinder(init_database):
    """The 5-unit SF6 Gas Cylinder product row."""
    return init_database['VGS-0002']


@pytest.fixture
def product_p1():
    """Plain snapshot of a product with 10 in stock, no database needed."""
    return ProductSnapshot(
        key='1',
        product_id='P1',
        name='Current Transformer',
        quantity=10,
        transport='Road',
        description='400kV CT spare',
        from_location='Hyderabad GIS',
        to_location='Vemagiri GIS',
        product_type='Electronics',
        remarks='Fragile'
    )


@pytest.fixture
def product_p2():
    """Plain snapshot of a product with 5 in stock."""
    return ProductSnapshot(
        key='2',
        product_id='P2',
        name='SF6 Gas Cylinder',
        quantity=5,
        transport='Rail',
        from_location='Visakhapatnam',
        product_type='Industrial'
    )


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests that need no application or database"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "api: marks tests as API endpoint tests"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically add markers based on test module names."""
    for item in items:
        # Add api marker to all API tests
        if 'api' in item.nodeid.lower():
            item.add_marker(pytest.mark.api)
        # End-to-end flows
        if 'flow' in item.name.lower() or 'end_to_end' in item.name.lower():
            item.add_marker(pytest.mark.integration)
        # Core tests run without Flask
        if 'test_ledger' in item.nodeid or 'test_assembler' in item.nodeid:
            item.add_marker(pytest.mark.unit)
