# Utils package init
"""
Basecamp Backend — Utilities
==============================

    - errors.py:         normalize_error() / build_error_body()
    - async_handler.py:  async_handler decorator for route handlers
"""
