import pytest

from sparksched import demand_v1alpha2 as v1alpha2
from sparksched.meta import GroupKind, GroupResource, Quantity, QuantityFormat, Scheme


@pytest.mark.parametrize(
    "text", ["", "pending", "fulfilled", "cannot-fulfill"]
)
def test_phase_values(text):
    status = v1alpha2.DemandStatus(phase=text)
    assert status.phase.value == text
    assert status.phase in v1alpha2.ALL_DEMAND_PHASES


def test_supported_resources():
    resources = v1alpha2.ResourceList(
        {name: Quantity.parse("5") for name in v1alpha2.ALL_SUPPORTED_RESOURCES}
    )
    assert sorted(resources) == sorted(["cpu", "memory", "nvidia.com/gpu"])
    assert resources.cpu() == Quantity.parse("5")
    assert resources.memory() == Quantity.parse("5")
    assert resources.nvidia_gpu() == Quantity.parse("5")


def test_resource_list_returns_stored_values():
    resources = v1alpha2.ResourceList(
        {
            v1alpha2.RESOURCE_CPU: Quantity.parse("2"),
            v1alpha2.RESOURCE_MEMORY: Quantity.parse("4Gi"),
            v1alpha2.RESOURCE_NVIDIA_GPU: Quantity.parse("1"),
        }
    )
    assert resources.cpu() == Quantity.parse("2")
    assert resources.memory() == Quantity.parse("4Gi")
    assert resources.nvidia_gpu() == Quantity.parse("1")


@pytest.mark.parametrize("accessor", ["cpu", "memory", "nvidia_gpu"])
def test_resource_list_defaults_to_zero(accessor):
    quantity = getattr(v1alpha2.ResourceList(), accessor)()
    assert quantity.is_zero()
    assert quantity.format is QuantityFormat.DECIMAL_SI


def test_resource_list_returns_copy():
    stored = Quantity.parse("3")
    resources = v1alpha2.ResourceList({v1alpha2.RESOURCE_CPU: stored})
    assert resources.cpu() is not stored
    assert resources.cpu() == stored


def test_demand_unit_coerces_resources():
    unit = v1alpha2.DemandUnit(resources={"cpu": Quantity.parse("1")}, count=2)
    assert isinstance(unit.resources, v1alpha2.ResourceList)
    assert unit.resources.cpu() == Quantity.parse("1")
    assert unit.count == 2


def test_status_coerces_phase():
    status = v1alpha2.DemandStatus(phase="fulfilled")
    assert status.phase is v1alpha2.DemandPhase.FULFILLED


def test_status_rejects_unknown_phase():
    with pytest.raises(ValueError):
        v1alpha2.DemandStatus(phase="unknown")


def test_demand_defaults():
    demand = v1alpha2.Demand()
    assert demand.status.phase is v1alpha2.DemandPhase.EMPTY
    assert demand.spec.zone is None
    assert demand.spec.units == []
    assert demand.hub() is None


def test_kind_and_resource():
    assert v1alpha2.kind("Demand") == GroupKind("scaler.palantir.com", "Demand")
    assert v1alpha2.resource("demands") == GroupResource("scaler.palantir.com", "demands")
    assert str(v1alpha2.resource("demands")) == "demands.scaler.palantir.com"


def test_add_to_scheme():
    scheme = Scheme()
    v1alpha2.add_to_scheme(scheme)
    gv = v1alpha2.SCHEME_GROUP_VERSION
    assert gv.version == "v1alpha2"
    assert scheme.known_type(gv.with_kind("Demand")) is v1alpha2.Demand
    assert scheme.known_type(gv.with_kind("DemandList")) is v1alpha2.DemandList