# Services package init
"""
Atomsmiths Backend — Services Layer
=====================================

What:  Business logic layer sitting between routes (HTTP) and MongoDB.
How:   Each service is a stateless singleton; every operation receives the
       database handle as its first argument.

Service Inventory:
    - MemberService:    register, list, get, update, delete (+ blog cascade)
    - EventService:     add, list (optionally upcoming only), get, update, delete
    - BlogService:      add (with author snapshot), list, get, by author, update, delete
    - DashboardService: counters, recent activity feed, member statistics
    - helpers:          id parsing, string cleanup, driver-error translation
"""
