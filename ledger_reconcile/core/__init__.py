"""
Core utilities — exceptions and cross-cutting concerns shared by the
loader, normalizer, aggregation engine and CLI.
"""
