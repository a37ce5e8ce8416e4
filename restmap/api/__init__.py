"""API Layer — HTTP boundary: route binding, auth gate middleware and error handlers.

Invariants:
    - The only layer that knows about HTTP status codes
    - All error responses share the RestMapError envelope
"""
