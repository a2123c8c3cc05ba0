"""
Utilities

- query: Strapi bracket-notation query strings
"""

from .query import query_pairs, stringify_query

__all__ = [
    "query_pairs",
    "stringify_query",
]
