# hoops_admin/errors/payment_errors.py

class PaymentError(Exception):
    """Base exception for payment-related errors."""
    pass

class PaymentNotFound(PaymentError):
    """Raised when a payment is not found."""
    pass

class InvalidPaymentData(PaymentError):
    """Raised when a payment amount or fee input is invalid."""
    pass
