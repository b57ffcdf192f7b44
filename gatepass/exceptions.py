"""
Typed exceptions for gate pass authoring and the store collaborators.

Every exception carries a machine-readable ``code`` so the UI and the REST
layer can report it without parsing messages:

    GatePassError
    |
    +-- SelectionError
    |   +-- InvalidQuantity         INVALID_QUANTITY
    |   +-- QuantityExceedsStock    QUANTITY_EXCEEDS_STOCK
    |
    +-- ValidationError
    |   +-- EmptySelection          EMPTY_SELECTION
    |   +-- MissingDestination      MISSING_DESTINATION
    |   +-- MissingPreparer         MISSING_PREPARER
    |   +-- InvalidProduct          INVALID_PRODUCT
    |
    +-- SubmissionError
    |   +-- SubmissionFailed        SUBMISSION_FAILED
    |   +-- SubmissionInProgress    SUBMISSION_IN_PROGRESS
    |
    +-- StoreError                  STORE_ERROR
        +-- ProductNotFound         PRODUCT_NOT_FOUND
        +-- InsufficientStock       INSUFFICIENT_STOCK
        +-- DuplicateSubmission     DUPLICATE_SUBMISSION

All of them are recoverable: the caller reports the notice and the ledger and
metadata are left as they were.
"""


class GatePassError(Exception):
    """Base exception for all gate pass errors."""

    code: str = "GATE_PASS_ERROR"

    def to_dict(self) -> dict:
        return {"error": self.code, "message": str(self)}


# Selection ledger


class SelectionError(GatePassError):
    """Base exception for ledger rejections."""

    code: str = "SELECTION_ERROR"


class InvalidQuantity(SelectionError):
    """Requested quantity is not a positive integer."""

    code: str = "INVALID_QUANTITY"

    def __init__(self, quantity):
        self.quantity = quantity
        super().__init__(f"Please enter a valid quantity (got {quantity!r})")


class QuantityExceedsStock(SelectionError):
    """Requested (or merged) quantity is more than the available stock."""

    code: str = "QUANTITY_EXCEEDS_STOCK"

    def __init__(self, product_id: str, requested: int, available: int, merged: bool = False):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        self.merged = merged
        if merged:
            message = (
                f"Total selected quantity ({requested}) exceeds available "
                f"quantity ({available}) for {product_id}"
            )
        else:
            message = f"Available quantity of {product_id} is only {available}"
        super().__init__(message)


# Gate pass validation


class ValidationError(GatePassError):
    """Base exception for incomplete gate pass input."""

    code: str = "VALIDATION_ERROR"


class EmptySelection(ValidationError):
    code: str = "EMPTY_SELECTION"

    def __init__(self):
        super().__init__("Please select at least one product for transport")


class MissingDestination(ValidationError):
    code: str = "MISSING_DESTINATION"

    def __init__(self):
        super().__init__("Please fill in the destination substation")


class MissingPreparer(ValidationError):
    code: str = "MISSING_PREPARER"

    def __init__(self):
        super().__init__("Please fill in the prepared by field")


class InvalidProduct(ValidationError):
    """Product draft is missing required fields or has bad values."""

    code: str = "INVALID_PRODUCT"

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message)


# Submission


class SubmissionError(GatePassError):
    code: str = "SUBMISSION_ERROR"


class SubmissionFailed(SubmissionError):
    """The gate pass store did not acknowledge the submission."""

    code: str = "SUBMISSION_FAILED"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Error generating gate pass: {reason}")


class SubmissionInProgress(SubmissionError):
    """A commit was attempted while another one is still in flight."""

    code: str = "SUBMISSION_IN_PROGRESS"

    def __init__(self):
        super().__init__("A gate pass submission is already in progress")


# Stores


class StoreError(GatePassError):
    """A store call failed (network error, timeout or server rejection)."""

    code: str = "STORE_ERROR"

    def __init__(self, message: str, status_code: int = None, error_code: str = None):
        self.status_code = status_code
        if error_code:
            # Code reported by a remote store
            self.code = error_code
        super().__init__(message)


class ProductNotFound(StoreError):
    code: str = "PRODUCT_NOT_FOUND"

    def __init__(self, product_key):
        self.product_key = product_key
        super().__init__(f"Product not found: {product_key}", status_code=404)


class InsufficientStock(StoreError):
    """The store holds less stock than a gate pass line asks for."""

    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: str, requested: int, available: int):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {product_id}: requested {requested}, available {available}",
            status_code=409,
        )


class DuplicateSubmission(StoreError):
    """A gate pass was already issued for this submission token."""

    code: str = "DUPLICATE_SUBMISSION"

    def __init__(self, gate_pass_number: str = None):
        self.gate_pass_number = gate_pass_number
        if gate_pass_number:
            message = f"This gate pass was already generated as {gate_pass_number}"
        else:
            message = "This gate pass was already generated"
        super().__init__(message, status_code=409)
