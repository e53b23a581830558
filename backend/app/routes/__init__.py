# Routes package init
"""
Customer Registry Backend — API Routes Package
================================================

Route Inventory:
    - customers.py:        /customers...   (FastAPI binding + outcome rendering)
    - customer_router.py:  ordered route table and dispatcher for /customers
    - health.py:           GET /health     (service health check)
"""
