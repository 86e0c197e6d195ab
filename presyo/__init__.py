"""
Presyo - Philippine commodity price bulletin parser.

Turns DA / DOE / DTI price-monitoring bulletins into normalized
price records and range records.
"""

__version__ = "8.0.0"
