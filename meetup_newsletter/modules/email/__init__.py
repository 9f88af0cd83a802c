"""
Email Module
============

Resend API integration with a log-only development fallback.
Includes the verification and update email templates.
"""

from .email_service import EmailService

__all__ = ['EmailService']
