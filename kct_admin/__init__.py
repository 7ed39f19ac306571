"""
KCT Admin Backend
Inventory, vendor inbox, order and shipping management for the KCT Menswear admin.
"""

__version__ = "0.1.0"
