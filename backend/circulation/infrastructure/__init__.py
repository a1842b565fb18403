"""Infrastructure Layer — database, stores, audit sinks, clocks, logging setup.

Invariants:
    - Implements the Protocols declared in core/repository_protocols.py
    - Never contains circulation rules (those live in core/)
"""
