import pytest

from azprovider.core.exceptions import ValidationException
from azprovider.core.logging import REDACTED
from azprovider.resources.maps_account import MapsAccountModel
from azprovider.sdk import ResourceData


def _data(**values) -> ResourceData[MapsAccountModel]:
    return ResourceData(MapsAccountModel, values)


def test_get_and_set_reject_unknown_attributes() -> None:
    d = _data(name="mymaps")
    assert d.get("name") == "mymaps"
    assert d.get("tags", {}) == {}
    with pytest.raises(KeyError):
        d.get("location")
    with pytest.raises(KeyError):
        d.set("location", "westeurope")


def test_desired_ignores_computed_values() -> None:
    d = _data(
        name="mymaps",
        resource_group_name="rg1",
        sku_name="S0",
        primary_access_key="secret",
        x_ms_client_id="abc",
    )
    desired = d.desired()
    assert desired.name == "mymaps"
    assert desired.primary_access_key is None
    assert desired.tags == {}


def test_desired_reports_every_problem() -> None:
    d = _data(name="-", resource_group_name="rg.", sku_name="X1")
    with pytest.raises(ValidationException) as excinfo:
        d.desired()
    problems = excinfo.value.details["errors"]
    assert {p.split(":")[0] for p in problems} == {"name", "resource_group_name", "sku_name"}


def test_desired_rejects_oversized_tags() -> None:
    d = _data(name="mymaps", resource_group_name="rg1", sku_name="S0", tags={"k": "v" * 300})
    with pytest.raises(ValidationException, match="tag value"):
        d.desired()


def test_redacted_masks_sensitive_values_only() -> None:
    d = _data(name="mymaps", primary_access_key="p", secondary_access_key=None, x_ms_client_id="c")
    red = d.redacted()
    assert red["primary_access_key"] == REDACTED
    assert red["secondary_access_key"] is None
    assert red["x_ms_client_id"] == "c"
    assert "p" == d.state()["primary_access_key"]
    assert "'p'" not in repr(d)


def test_id_lifecycle() -> None:
    d = ResourceData(MapsAccountModel, id="x", is_new_resource=True, timeouts={"read": 10})
    assert d.id == "x"
    assert d.is_new_resource()
    d.set_id("")
    d.mark_new_resource(False)
    assert d.id == ""
    assert not d.is_new_resource()
    assert d.timeouts == {"read": 10}
