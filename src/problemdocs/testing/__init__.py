"""Test utilities for problemdocs registries.

    from problemdocs.testing import TestClient
"""

from problemdocs.testing.client import CapturingSend, TestClient

__all__ = ["CapturingSend", "TestClient"]
