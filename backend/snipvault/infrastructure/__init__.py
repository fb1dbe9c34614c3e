"""Infrastructure Layer — storage media, database sessions and logging.

Invariants:
    - Infrastructure never imports pure-domain logic beyond errors and protocols
    - All storage failures surface as typed errors from core/errors.py
"""
