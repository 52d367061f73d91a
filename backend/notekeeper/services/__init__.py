"""
Notekeeper API - Services Layer
================================

What:  Business logic between the routes (HTTP) and the in-memory store.

Service Inventory:
    - NoteService: Orchestrates create / list / update / search
    - SlidingWindowRateLimiter: Per-client limit on note creation
    - validation: Pure trimming and blank-field checks
"""
