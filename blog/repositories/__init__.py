"""
Persistence adapters.

The content store is a single JSON document; services depend on
DocumentStore instead of touching the file directly.
"""
