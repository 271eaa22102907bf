"""
Fee Tool Package

Cart-transform function that prices a checkout service fee line.
Resolves the fee using Rules → Subtotal → Tier → Fee pipeline with a 0% fallback.
"""

__version__ = "1.0.0"
