"""
Test suite for custody-registrar

Contains:
- tests/unit/          : Unit, integration and property tests for the registrar core
"""
