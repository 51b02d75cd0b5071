"""
Core domain models, errors and the height clock.

This module contains the foundational building blocks of the registrar that
are independent of the external token ledger (custody adapters, storage).
"""
