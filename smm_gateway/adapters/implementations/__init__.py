"""
Adapter implementations package.
Concrete fulfillment vendor adapters and payment rails.
"""
