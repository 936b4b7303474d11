"""Tests for folio.__init__ — every public name resolves lazily."""

import pytest

import folio


@pytest.mark.parametrize("name", folio.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(folio, name)
    assert obj is not None, f"folio.{name} resolved to None"


def test_unknown_name_raises_attribute_error() -> None:
    """Accessing an unknown name raises AttributeError."""
    with pytest.raises(AttributeError, match="no attribute"):
        folio.__getattr__("ThisDoesNotExist")
