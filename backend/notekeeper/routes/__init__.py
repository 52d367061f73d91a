# Routes package init
"""
Notekeeper API - Routes Package
================================

Route Inventory:
    - notes.py:   POST /notes                (create, rate limited)
                  GET  /notes                (list)
                  GET  /notes/search?q=      (search)
                  PUT  /notes/{id}           (partial update)
    - health.py:  GET  /health               (service health check)

Routes handle HTTP concerns only and delegate to NoteService.
"""
