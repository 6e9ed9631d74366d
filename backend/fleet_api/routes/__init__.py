# Routes package init
"""
Fleet Management API — API Routes Package
=========================================

Route Inventory:
    - auth.py:          POST /api/auth/log-in
                        POST /api/auth/sign-up
                        GET  /api/auth/me
    - trajectories.py:  GET  /api/trajectories
                        GET  /api/trajectories/latest
                        GET  /api/trajectories/export
    - taxis.py:         GET  /api/taxis
    - emails.py:        POST /api/emails/plain-text
                        POST /api/emails/attachment
    - health.py:        GET  /health

Routes stay thin: extract parameters, call a service, return its records.
Failures propagate as FleetManagementError and are rendered by main.py.
"""
