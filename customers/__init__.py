"""
Customers module - read-only customer views.

This module handles:
- Licenses of a customer email across every active brand
- Licenses of a customer email within one brand
- Product access checks for a customer
"""
