"""
Infrastructure package for the SMM Gateway.
Contains the exchange rate client and cache, and boundary error handling.
"""
