# catalog/schemas/__init__.py
