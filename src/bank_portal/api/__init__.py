"""
bank_portal/api

HTTP layer:
- gate.py: route policy table + auth middleware
- users.py / admin.py / employee.py: routers per principal kind
- schemas.py / serializers.py: request models and response shapes
"""
