import pytest

from azprovider.arm import tags
from azprovider.arm.validators import validate_name


@pytest.mark.parametrize("name", ["mymaps", "a1", "My.Maps_account-01", "0x"])
def test_valid_account_names(name: str) -> None:
    assert validate_name("maps_account", name)


@pytest.mark.parametrize("name", ["", None, "a", "-maps", ".maps", "my maps", "maps!", "mymaps\n"])
def test_invalid_account_names(name) -> None:
    assert not validate_name("maps_account", name)


@pytest.mark.parametrize("name", ["rg1", "my-rg_(prod).x", "a" * 90])
def test_valid_resource_group_names(name: str) -> None:
    assert validate_name("resource_group", name)


@pytest.mark.parametrize("name", ["", "rg.", "a" * 91, "rg/1", "rgé", "rg1\n"])
def test_invalid_resource_group_names(name: str) -> None:
    assert not validate_name("resource_group", name)


def test_expand_stringifies_and_drops_none() -> None:
    assert tags.expand({"a": 1, "b": None, "c": "x"}) == {"a": "1", "c": "x"}
    assert tags.expand(None) == {}


def test_flatten_handles_missing_values() -> None:
    assert tags.flatten(None) == {}
    assert tags.flatten({"a": None, "b": "x"}) == {"a": "", "b": "x"}


def test_validate_limits() -> None:
    assert tags.validate({"k": "v"}) == []
    assert tags.validate(None) == []
    too_many = {f"k{i}": "v" for i in range(51)}
    assert any("maximum of 50" in e for e in tags.validate(too_many))
    assert tags.validate({"k" * 513: "v"})
    assert tags.validate({"k": "v" * 257})
    assert tags.validate({"k" * 512: "v" * 256}) == []
