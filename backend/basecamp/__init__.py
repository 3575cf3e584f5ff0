"""
Basecamp Backend — Application Package Initializer
====================================================

What: Marks the `basecamp` directory as a Python package.
Who:  Imported by uvicorn (`basecamp.main:app`), pytest, and the `basecamp` console script.

Architecture Note:
    ┌─────────────────────────────────────┐
    │      Middleware (cross-cutting)     │  ← request ID, logging, headers, limits
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (temp files, media)    │  ← upload-then-cleanup lives here
    ├─────────────────────────────────────┤
    │   Database (MongoDB client handle)  │  ← connected once at startup
    └─────────────────────────────────────┘

    Every response body is an envelope ({statusCode, message, data, success});
    every failure is funnelled through one error responder registered in main.py.
"""

__version__ = "1.0.0"
