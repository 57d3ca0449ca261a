# Routes package init
"""
Product Catalog API: Routes Package
====================================

Route Inventory:
    - auth.py:        POST /auth/register, POST /auth/login
    - users.py:       GET /users/, GET /users/me, PUT /users/me/password
    - categories.py:  CRUD /categories/
    - products.py:    CRUD /products/, filters, /products/reports/*
    - health.py:      GET /, GET /health

Routes stay thin: extract request data, call a service, return a schema.
Auth and role checks are dependencies; errors are exceptions handled in main.py.
"""
