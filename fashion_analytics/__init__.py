"""
Fashion Retail Analytics

Statistical report pipeline over fashion-retail transaction data.
"""

__version__ = "1.0.0"
