"""
Pricing module for rental cost breakdowns.
"""

from .calculator import PricingCalculator, round_currency

__all__ = ['PricingCalculator', 'round_currency']
