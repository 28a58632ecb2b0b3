"""
Domain exceptions raised while settling a sale.

Each exception carries a machine-readable ``code`` and the HTTP status the
POS API answers with, so views can translate them without a lookup table.
"""


class SettlementError(Exception):
    """Base class for every failure that aborts a settlement."""

    code = "settlement_error"
    status_code = 400
    default_detail = "The sale could not be completed."

    def __init__(self, detail=None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class EmptyCart(SettlementError):
    """Raised when settling a cart without any lines."""

    code = "empty_cart"
    default_detail = "Cart is empty."


class CustomerRequired(SettlementError):
    """Raised when paying by balance without a customer."""

    code = "customer_required"
    default_detail = "A customer is required for balance payments."


class InvalidPaymentMethod(SettlementError):
    """Raised for a payment method outside the supported vocabulary."""

    code = "invalid_payment_method"
    default_detail = "Unsupported payment method."


class InsufficientBalance(SettlementError):
    """Raised when the customer's wallet does not cover the grand total."""

    code = "insufficient_balance"
    status_code = 409
    default_detail = "Insufficient wallet balance."


class InsufficientStock(SettlementError):
    """Raised when a line would take a product's stock below zero."""

    code = "insufficient_stock"
    status_code = 409
    default_detail = "Insufficient stock."


class PersistenceFailure(SettlementError):
    """Raised when the database rejects any write of the settlement."""

    code = "persistence_failure"
    status_code = 503
    default_detail = "The sale could not be saved. Please try again."


class AmountOutOfRange(SettlementError):
    """Raised when a total is larger than a sale record can store."""

    code = "amount_out_of_range"
    default_detail = "Sale total is too large to record."
