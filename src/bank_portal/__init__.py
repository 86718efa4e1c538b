"""
bank_portal

Banking demo service: customers deposit, withdraw, transfer and read their
history; employees inspect customers; admins manage employee accounts.
"""

__version__ = "1.0.0"
