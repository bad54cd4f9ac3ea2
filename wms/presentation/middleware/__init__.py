"""
Middleware layer for the WMS admin API.

This package contains middleware components for request processing,
correlation IDs, security headers, timeouts and rate limiting.
"""
