"""
SMM Gateway - Vendor normalization layer for the engagement marketplace.

This package hides upstream fulfillment vendors, payment rails and the exchange
rate vendor behind stable contracts, returning normalized values that callers
persist themselves.
"""

__version__ = "0.1.0"
