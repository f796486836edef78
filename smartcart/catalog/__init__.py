"""
Catalog layer.

Responsibilities:
- Define the canonical product, customer, transaction and store records.
- Hold one read-only catalog snapshot with memoized lookups.
- Expose pandas frames of products and transaction lines for the engines.
"""
