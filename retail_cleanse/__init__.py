"""
Batch cleaning pipeline for retail transaction records.
"""

__version__ = "0.1.0"
