"""
Cake Pricing Package

Pricing service for the custom-cake storefront.
Turns a cake configuration into an itemized price breakdown in cents.
"""

__version__ = "1.0.0"
