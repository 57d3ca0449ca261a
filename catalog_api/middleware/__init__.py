# Middleware package init
"""
Product Catalog API: Middleware Package
========================================

Middleware Chain (request direction):
    [CORS] → [Request ID] → [Logging] → [Rate Limit] → [GZip] → Route

    1. CORS outermost: answers preflight requests and decorates every
       response, 429 rejections included
    2. Request ID before Logging: every access line carries the id
    3. Rate Limit inside Logging: rejected requests are still logged and
       tagged with a request id, but cost nothing further downstream

Authentication and role checks are NOT middleware: they are per-route
FastAPI dependencies (catalog_api.dependencies), because only some routes
need them.
"""
