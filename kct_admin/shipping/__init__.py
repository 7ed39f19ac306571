"""
Shipping Package
Rates, labels, tracking and package recommendations for orders.
"""

from .manager import PackageRecommendation, ShippingManager

__all__ = ["PackageRecommendation", "ShippingManager"]
