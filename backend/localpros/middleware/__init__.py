"""
LocalPros Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters):
    Request → [Request ID] → [Rate Limit] → [Logging] → [GZip] → [CORS] → Route

    1. Request ID first, so every later log line and error body (429s
       included) carries the correlation id
    2. Rate Limit rejects abusive clients before any route work
    3. Logging records status and duration of what actually ran
"""
