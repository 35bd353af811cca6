"""
Entitlement service Django project.
"""
