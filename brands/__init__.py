"""
Brands module - Brand and Product management.

This module handles:
- Brand entity and domain logic
- Product entity and domain logic
- Brand repository (port)
- Brand infrastructure (Django ORM adapters)
"""

