"""
hrcmd - Unified command palette engine for the HR workspace
"""

__version__ = "0.3.0"
