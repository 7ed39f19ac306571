"""
Edge Functions Package
HTTP client for the hosted serverless functions.
"""

from .client import EdgeFunctionClient, unwrap

__all__ = ["EdgeFunctionClient", "unwrap"]
