"""Domain exceptions for the storefront backend.

Every exception maps to one HTTP status code through ``status_code``; the
handler registered in ``main.py`` turns them into ``{"detail": ...}``
responses.
"""


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(StorefrontError):
    """Raised for malformed input or a request the current state forbids."""

    status_code = 400


class NotFoundError(StorefrontError):
    """Raised when a referenced resource does not exist."""

    status_code = 404


class ConflictError(StorefrontError):
    """Raised when a write collides with a duplicate resource."""

    status_code = 409


class TransientStoreError(StorefrontError):
    """Raised when the store stays locked or times out after retries."""

    status_code = 503


class RenderingFailure(StorefrontError):
    """Raised when an invoice document cannot be produced."""

    status_code = 500


class EmptyCartError(ValidationError):
    def __init__(self, customer_id: int):
        self.customer_id = customer_id
        super().__init__("Cart is empty or not found.")


class InvalidStatusError(ValidationError):
    pass


class ProductUnavailableError(ValidationError):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product {product_id} is not available")


class NoWindowConfiguredError(ValidationError):
    def __init__(self):
        super().__init__("No ordering window configured")


class CustomerNotFoundError(NotFoundError):
    def __init__(self, customer_id: int):
        self.customer_id = customer_id
        super().__init__(f"Customer not found: {customer_id}")


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class CartItemNotFoundError(NotFoundError):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__("Product not found in cart.")


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class InvoiceNotFoundError(NotFoundError):
    def __init__(self, invoice_id: int):
        self.invoice_id = invoice_id
        super().__init__(f"Invoice not found: {invoice_id}")


class WindowNotFoundError(NotFoundError):
    def __init__(self, window_id: int):
        self.window_id = window_id
        super().__init__(f"Ordering window not found: {window_id}")
