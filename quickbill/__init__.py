"""
QuickBill - Source Package

A single-page expense tracker that keeps everything on the device.

DESIGN PRINCIPLES:
1. The store owns the data; views are always recomputed from it
2. Bad input is rejected before anything is stored
3. Destructive actions need explicit confirmation
4. Every command is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "QuickBill Team"
