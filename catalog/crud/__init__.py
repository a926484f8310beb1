# catalog/crud/__init__.py
