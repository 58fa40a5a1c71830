"""
Draft behavior modeling and mock draft simulation.
"""

__version__ = "1.0.0"
