# Routes package init
"""
Atomsmiths Backend — API Routes Package
=========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - dispatch.py:   /api/atomsmiths_db_api?action=...   (single-URL action router)
    - members.py:    /api/members[/{id}[/blogs]]
    - events.py:     /api/events[/{id}]
    - blogs.py:      /api/blogs[/{id}]
    - dashboard.py:  /api/dashboard[/activity|/stats]
    - join.py:       POST /api/join                       (public join form)
    - health.py:     GET  /health

Routes are thin: they extract parameters, call a service, and wrap the result
in the {"ok": true, "data": ...} envelope. Business rules live in services.
"""
