"""
SEPA Utilities

Validation, sanitizing and TARGET2 date helpers for SEPA credit transfer
(pain.001) and direct debit (pain.008) files, with an optional FastAPI
service in sepa_utilities.main.
"""

__version__ = "1.0.0"
