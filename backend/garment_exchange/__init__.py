"""
Garment Exchange - vendor garment inventory and retailer order placement
"""
__version__ = "1.0.0"
