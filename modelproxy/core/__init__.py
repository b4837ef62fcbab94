"""Core Layer - pure proxy data model, transcoding and protocols. No IO, no async.

Invariants:
    - No module in core/ imports from services/, infrastructure/, models/ or db/
    - All functions are pure and deterministic
"""
