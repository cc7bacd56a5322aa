"""
Test suite for folio-core

Contains:
- tests/unit/          : Unit tests for individual modules
"""
