# Services package init
"""
Product Catalog API: Services Layer
====================================

What:  Business logic between the routes (HTTP) and the database.
How:   Each service is a stateless class with a module-level singleton;
       methods take the request's AsyncSession as their first argument and
       raise catalog_api.exceptions types, never HTTP errors.

Service Inventory:
    - UserService:     registration, login, user listing, password changes
    - CategoryService: category CRUD with unique names
    - ProductService:  product CRUD, filtered listing, inventory reports
    - base:            identifier parsing, unique-violation translation
"""
