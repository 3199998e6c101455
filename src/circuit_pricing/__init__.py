"""
Circuit Pricing Package

Carrier quote pricing for a telecom reseller: resolves the monthly price
shown to admins and agents, and composes the agent notifications that
carry those prices.
"""

__version__ = "1.0.0"
