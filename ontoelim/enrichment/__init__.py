"""
Hypergeometric over-representation statistics.
"""
