"""
Activations module - License activation and seat management.

This module handles:
- Activation entity and domain logic
- Seat management and limits
- Instance activation/deactivation
"""

