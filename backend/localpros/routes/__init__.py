"""
LocalPros Backend — API Routes Package
========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - auth.py:              /api/auth/*               register, login, logout
    - users.py:             /api/users/me/*           profile, picture, portfolio
    - professionals.py:     /api/professionals/*      directory browsing
    - service_requests.py:  /api/service-requests/*   request lifecycle
    - catalog.py:           /api/catalog/*            picker reference data
    - files.py:             /api/files/{path}         stored images
    - health.py:            /health                   service health check

Design Principle:
    Routes are THIN: extract request data, call a service, shape the
    response. Business rules live in services.
"""
