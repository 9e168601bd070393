"""
lcms_kernel -- standard ion curation kernel.

Holds the two persisted tables (standard ion results and their append-only
curated ion history), the stores over them, and the reconciliation service
that applies curator edits inside one caller-owned transaction.
"""
