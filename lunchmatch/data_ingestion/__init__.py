"""
Restaurant catalog ingestion.

Responsibilities:
- Read the raw restaurant seed file.
- Normalize it into the canonical catalog columns.
- Validate rows into Restaurant records, dropping malformed ones.
- Persist the processed catalog for the recommendation service.
"""
