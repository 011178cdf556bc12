"""Test utilities for filedrop applications::

    from filedrop.testing import TestClient
"""

from filedrop.testing.client import TestClient

__all__ = ["TestClient"]
