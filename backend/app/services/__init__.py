# Services package init
"""
Customer Registry Backend — Services Layer
============================================

Service Inventory:
    - CustomerService: list/create/fetch/update/delete against the store
    - SeedService: loads the initial data set at startup
"""
