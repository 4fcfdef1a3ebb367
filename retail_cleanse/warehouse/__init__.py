"""
PostgreSQL sink for clean records, the rejection ledger and the audit trail.
"""
