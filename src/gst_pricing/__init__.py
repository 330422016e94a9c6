"""
GST Pricing Package

Pricing core for the restaurant point-of-sale client.
Turns an entered price into a CGST/SGST breakdown, builds order type × size
pricing matrices for menu items and aggregates cart lines into invoice totals.
"""

__version__ = "1.0.0"
