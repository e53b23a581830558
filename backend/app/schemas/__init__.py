# Schemas package init
"""
Customer Registry Backend — Schemas Package
=============================================

    - customer.py: Customer record, ErrorResponse, HealthResponse
    - outcome.py:  Outcome tagged variant returned by operations and routing
"""
