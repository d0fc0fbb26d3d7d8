"""
HTTP surface for the SMM Gateway: health checks and inbound payment webhooks.
"""
