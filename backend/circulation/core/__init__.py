"""Core Layer — pure circulation rules, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic ("today" is always a parameter)

Design Decisions:
    - Functional core separated from imperative shell: the lifecycle engine in
      services/ reads the store, calls these functions, and writes back
"""
