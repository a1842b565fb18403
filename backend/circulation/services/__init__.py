"""Services Layer — imperative shell orchestrating the pure core.

Invariants:
    - Services talk to stores and sinks; decisions are delegated to core/
"""
