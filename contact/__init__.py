"""
Contact App

Handles the portfolio contact form:
- Public submission endpoint (name, email, phone, message)
- Best-effort persistence through the active store
- Optional email (admin alert + confirmation) and WhatsApp notifications
"""
