# catalog/routers/__init__.py
