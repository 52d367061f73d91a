"""
Notekeeper API - Application Package
=====================================

An in-memory note-taking HTTP service: create, list, update and search short
text notes, with per-client rate limiting on creation.

Architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (validation, limiting)   │  ← Business rules
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← Note dataclass + Pydantic
    ├─────────────────────────────────────┤
    │        Store (in-memory list)       │  ← Process-lifetime state
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
