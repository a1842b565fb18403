"""Circulation Package — library loan lifecycle engine.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
