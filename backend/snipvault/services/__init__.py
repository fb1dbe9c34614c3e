"""Services Layer — imperative shell around the pure snippet core.

Invariants:
    - Services own all awaiting and clock reads; core functions stay pure
"""
