"""
Logging, metrics and lineage for the cleaning pipeline.
"""
