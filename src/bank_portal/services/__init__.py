"""
bank_portal/services

Business logic used by the HTTP routers:
- accounts.py: deposit / withdraw / transfer
- history.py: per-user transaction history
- management.py: employee CRUD, customer lookups, admin seeding
- identity.py: registration and login
"""
