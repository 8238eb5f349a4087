"""Smoke test to verify the project is set up correctly."""

from jobsh import __doc__


def test_package_is_importable() -> None:
    """Verify that jobsh can be imported."""
    assert __doc__ is not None
