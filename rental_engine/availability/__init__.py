"""
Availability module for validating proposed rental windows.
"""

from .validator import AvailabilityValidator, format_duration, rejection_message

__all__ = ['AvailabilityValidator', 'format_duration', 'rejection_message']
