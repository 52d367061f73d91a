# Middleware package init
"""
Notekeeper API - Middleware Package
====================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    Request ID runs first so the access log line carries the id.

Rate limiting is not middleware here: it applies to note creation only and
lives in services/rate_limiter.py.
"""
