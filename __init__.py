"""Rent, electricity and water billing for a handful of tenants."""

__version__ = '0.1.0'
