"""
Flat DB - a minimal single-user relational data manager.

Accepts CREATE TABLE, INSERT and SELECT statement text, validates values
against a typed column system and keeps every table in a pair of CSV files.
"""

__version__ = "0.1.0"
