"""
Core utilities shared across the CampShare backend.

This package hosts configuration, logging setup, password schemes, the SMS
adapter and small helpers. Services depend on these primitives instead of
reading the environment or talking to Twilio directly.
"""
