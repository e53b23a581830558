"""
Customer Registry Backend — Application Package Initializer
=============================================================

Architecture Note:
    ┌─────────────────────────────────────┐
    │     Routes (HTTP + CustomerRouter)  │  ← matching, body decoding, rendering
    ├─────────────────────────────────────┤
    │    Services (Customer operations)   │  ← guarded reads and mutations
    ├─────────────────────────────────────┤
    │       Schemas (Customer, Outcome)   │  ← pydantic models, tagged results
    ├─────────────────────────────────────┤
    │       Store (in-memory, locked)     │  ← one shared collection per process
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
