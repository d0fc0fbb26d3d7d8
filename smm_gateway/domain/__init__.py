"""
Domain package for the SMM Gateway.

Normalized value types shared by the provider and payment adapters and by
the currency service. Nothing here performs I/O.
"""
