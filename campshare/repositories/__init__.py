"""
Persistence adapters.

Bucket stores (memory, JSON file, SQL) hold serialized collections; the
StateRepository converts records to and from them. Services depend on the
repository and never touch a store directly.
"""
