"""Payment gateway integrations."""

from .razorpay import RazorpayClient, RazorpayError, verify_signature

__all__ = ["RazorpayClient", "RazorpayError", "verify_signature"]
