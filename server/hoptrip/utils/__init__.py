"""
Utilities Package
=================

Various utility functions and helpers.

Modules:
- date_helpers: itinerary date expansion and display formatting
- jwt_helpers: session and invitation token utilities
- response_helpers: Response formatting utilities
- sanitization: Input sanitization utilities
- validation_helpers: pydantic payload parsing, email normalization
"""
