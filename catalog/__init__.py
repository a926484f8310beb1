# catalog/__init__.py
"""Perfume catalog: REST service over a single product table, plus its client."""
