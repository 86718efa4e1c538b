"""
bank_portal/db

Persistence layer:
- session.py: async engine + session factory, declarative Base
- models.py: ORM tables (users, employees, admins, transactions)
- crud.py: lookup helpers shared by the services
"""
