"""
Delta Exchange adapters.

`signing` builds authenticated headers, `endpoints` maps logical operations
to REST paths and `client` forwards a signed call.
"""

from .client import DeltaForwarder  # noqa: F401
