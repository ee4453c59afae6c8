"""
Ticket Reduce

Recursive reduction of lottery ticket actions into committed ticket and bank
trees, with a verifiable certificate chain over every step.
"""

__version__ = "0.1.0"
