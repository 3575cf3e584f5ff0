# Middleware package init
"""
Basecamp Backend — Middleware Package
=======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first, as installed by main.create_app):
    Request → [CORS] → [Request ID] → [Logging] → [Security Headers]
            → [Body Limit] → [GZip] → Route Handler

    - CORS outermost: preflights are answered before anything else, and
      rejections from inner layers still carry CORS headers
    - Request ID before Logging: every access-log line carries the ID
    - Logging sees the final status code, including 413 from the body limit
    - Security headers are added to every response, errors included
"""
