# src/a11yscan/__init__.py

__version__ = "0.1.0"
