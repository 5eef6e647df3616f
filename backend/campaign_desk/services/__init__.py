"""
Business logic services.
"""
from .auth_service import AuthService
from .email_service import EmailService
from .razorpay_service import RazorpayService

__all__ = ["AuthService", "EmailService", "RazorpayService"]
