"""Test basic package functionality."""

import zoom_client


def test_version():
    """Test that package version is defined."""
    assert hasattr(zoom_client, "__version__")
    assert zoom_client.__version__ == "0.1.0"


def test_public_names_exported():
    """Test that the main entry points are importable from the package root."""
    for name in ("ZoomClient", "Paginator", "Success", "Failure", "Termination"):
        assert hasattr(zoom_client, name)
