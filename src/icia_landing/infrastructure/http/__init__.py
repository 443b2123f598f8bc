"""
HTTP Client Package.

External service clients:
- Upstream region statistics API
"""

from icia_landing.infrastructure.http.upstream_client import RegionsUpstreamClient


__all__ = [
    "RegionsUpstreamClient",
]
