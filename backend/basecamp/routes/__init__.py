# Routes package init
"""
Basecamp Backend — API Routes Package
=======================================

Route Inventory (all mounted under /api/v1 by main.py):
    - health.py:  GET    /health                 (also at /health)
    - media.py:   POST   /media                  (upload to media host)
                  DELETE /media/{public_id}      (delete hosted file)

Routes are thin: read the request, call a service, return an APIResponse.
Every handler is wrapped with async_handler so failures reach the
centralized error responder already normalized.
"""
