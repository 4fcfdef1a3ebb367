"""
Cleaning core: ingestion, identity resolution, normalization and imputation.
"""
