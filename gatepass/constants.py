TRANSPORT_MODES = ('Road', 'Rail', 'Air', 'Sea', 'Multi-modal')

PRODUCT_TYPES = (
    'Electronics',
    'Clothing',
    'Food',
    'Accessories',
    'Healthcare',
    'Industrial',
    'Books',
    'Furniture',
    'Sports',
    'Beauty',
)

DEFAULT_TRANSPORT = 'Road'
DEFAULT_PRODUCT_TYPE = 'Electronics'

# Field order of a product line inside a gate pass submission
GATE_PASS_LINE_FIELDS = (
    'productId',
    'name',
    'transport',
    'description',
    'selectedQuantity',
    'type',
    'remarks',
)

GATE_PASS_NUMBER_PREFIX = 'GP'

MOVEMENT_GATE_PASS = 'gate_pass'
MOVEMENT_ADJUSTMENT = 'adjustment'
MOVEMENT_RECEIPT = 'receipt'
