"""Scaler demands, version v1alpha1, convertible to and from v1alpha2."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from sparksched import demand_v1alpha2 as v1alpha2
from sparksched.meta import (
    ConversionError,
    GroupKind,
    GroupResource,
    GroupVersion,
    ListMeta,
    ObjectMeta,
    Quantity,
    Scheme,
)

GROUP_NAME = "scaler.palantir.com"

SCHEME_GROUP_VERSION = GroupVersion(GROUP_NAME, "v1alpha1")

DEMAND_PHASE_EMPTY = v1alpha2.DemandPhase.EMPTY.value
DEMAND_PHASE_PENDING = v1alpha2.DemandPhase.PENDING.value
DEMAND_PHASE_FULFILLED = v1alpha2.DemandPhase.FULFILLED.value
DEMAND_PHASE_CANNOT_FULFILL = v1alpha2.DemandPhase.CANNOT_FULFILL.value

# Every phase a demand can be in, in lifecycle order.
ALL_DEMAND_PHASES = v1alpha2.ALL_DEMAND_PHASES


def _type_name(cls: type) -> str:
    return f"{cls.__module__.rsplit('.', 1)[-1]}.{cls.__qualname__}"


@dataclass
class DemandUnit:
    """A count of identical CPU, memory and GPU requirements."""

    cpu: Quantity = field(default_factory=Quantity)
    memory: Quantity = field(default_factory=Quantity)
    gpu: Quantity = field(default_factory=Quantity)
    count: int = 0


@dataclass
class DemandSpec:
    """What a demand asks for.

    A long-lived demand is mutable and acts as a buffer of ready capacity in
    its instance group.
    """

    units: list[DemandUnit] = field(default_factory=list)
    instance_group: str = ""
    is_long_lived: bool = False


@dataclass
class DemandStatus:
    """The phase a demand is in and when it last changed."""

    phase: str = DEMAND_PHASE_EMPTY
    last_transition_time: datetime | None = None


@dataclass
class Demand:
    """Currently unschedulable resources."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: DemandSpec = field(default_factory=DemandSpec)
    status: DemandStatus = field(default_factory=DemandStatus)

    def convert_to(self, dst: v1alpha2.Demand) -> None:
        """Fill the storage-version demand from this one."""
        if not isinstance(dst, v1alpha2.Demand):
            raise ConversionError(
                "dst type not as expected",
                expectedType=_type_name(v1alpha2.Demand),
                actualType=_type_name(type(dst)),
            )
        try:
            phase = v1alpha2.DemandPhase(self.status.phase)
        except ValueError:
            raise ConversionError(
                "unsupported demand phase found during conversion to storage version",
                phase=self.status.phase,
            ) from None

        dst.metadata = self.metadata.copy()

        dst.status.last_transition_time = self.status.last_transition_time
        dst.status.phase = phase

        dst.spec.instance_group = self.spec.instance_group
        dst.spec.is_long_lived = self.spec.is_long_lived
        dst.spec.units = [
            v1alpha2.DemandUnit(
                resources=v1alpha2.ResourceList(
                    {
                        v1alpha2.RESOURCE_CPU: unit.cpu.copy(),
                        v1alpha2.RESOURCE_MEMORY: unit.memory.copy(),
                        v1alpha2.RESOURCE_NVIDIA_GPU: unit.gpu.copy(),
                    }
                ),
                count=unit.count,
            )
            for unit in self.spec.units
        ]

    def convert_from(self, src: v1alpha2.Demand) -> None:
        """Fill this demand from the storage version.

        Raise ConversionError if a unit asks for a resource this version cannot hold.
        """
        if not isinstance(src, v1alpha2.Demand):
            raise ConversionError(
                "src type not as expected",
                expectedType=_type_name(v1alpha2.Demand),
                actualType=_type_name(type(src)),
            )

        self.metadata = src.metadata.copy()

        self.status.last_transition_time = src.status.last_transition_time
        self.status.phase = v1alpha2.DemandPhase(src.status.phase).value

        self.spec.instance_group = src.spec.instance_group
        self.spec.is_long_lived = src.spec.is_long_lived

        units = []
        for src_unit in src.spec.units:
            unit = DemandUnit(count=src_unit.count)
            for name, quantity in src_unit.resources.items():
                if name == v1alpha2.RESOURCE_CPU:
                    unit.cpu = quantity.copy()
                elif name == v1alpha2.RESOURCE_MEMORY:
                    unit.memory = quantity.copy()
                elif name == v1alpha2.RESOURCE_NVIDIA_GPU:
                    unit.gpu = quantity.copy()
                else:
                    raise ConversionError(
                        "unsupported resource found during demand conversion "
                        "from storage version to v1alpha1",
                        resourceName=name,
                        resourceQuantity=str(quantity),
                    )
            units.append(unit)
        self.spec.units = units


@dataclass
class DemandList:
    """A list of demands."""

    metadata: ListMeta = field(default_factory=ListMeta)
    items: list[Demand] = field(default_factory=list)


def kind(name: str) -> GroupKind:
    """Return the group kind for a kind name in this group version."""
    return SCHEME_GROUP_VERSION.with_kind(name).group_kind()


def resource(name: str) -> GroupResource:
    """Return the group resource for a resource name in this group version."""
    return SCHEME_GROUP_VERSION.with_resource(name).group_resource()


def add_to_scheme(scheme: Scheme) -> None:
    """Register this version's kinds with the scheme."""
    scheme.add_known_types(SCHEME_GROUP_VERSION, Demand, DemandList)