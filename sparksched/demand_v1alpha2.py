"""Scaler demands, version v1alpha2: the storage version."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from sparksched.meta import (
    GroupKind,
    GroupResource,
    GroupVersion,
    ListMeta,
    ObjectMeta,
    Quantity,
    QuantityFormat,
    Scheme,
)

GROUP_NAME = "scaler.palantir.com"

SCHEME_GROUP_VERSION = GroupVersion(GROUP_NAME, "v1alpha2")

RESOURCE_CPU = "cpu"
RESOURCE_MEMORY = "memory"
RESOURCE_NVIDIA_GPU = "nvidia.com/gpu"

# Every resource a demand unit may ask for.
ALL_SUPPORTED_RESOURCES = (RESOURCE_CPU, RESOURCE_MEMORY, RESOURCE_NVIDIA_GPU)


class DemandPhase(str, Enum):
    """The lifecycle phase of a demand."""

    EMPTY = ""
    """The demand was just created."""
    PENDING = "pending"
    """The scaler acknowledged the demand but has not yet acted on it."""
    FULFILLED = "fulfilled"
    """The scaler acted and capacity to meet the demand is expected to exist."""
    CANNOT_FULFILL = "cannot-fulfill"
    """The scaler is unable to satisfy the demand."""


# Every phase a demand can be in, in lifecycle order.
ALL_DEMAND_PHASES = (
    DemandPhase.EMPTY,
    DemandPhase.PENDING,
    DemandPhase.FULFILLED,
    DemandPhase.CANNOT_FULFILL,
)


def _zero() -> Quantity:
    return Quantity.from_int(0, QuantityFormat.DECIMAL_SI)


class ResourceList(dict):
    """Maps a resource name to the quantity requested of it."""

    def _lookup(self, name: str) -> Quantity:
        found = self.get(name)
        return found.copy() if found is not None else _zero()

    def cpu(self) -> Quantity:
        """The requested CPU, or zero when not specified."""
        return self._lookup(RESOURCE_CPU)

    def memory(self) -> Quantity:
        """The requested memory, or zero when not specified."""
        return self._lookup(RESOURCE_MEMORY)

    def nvidia_gpu(self) -> Quantity:
        """The requested Nvidia GPUs, or zero when not specified."""
        return self._lookup(RESOURCE_NVIDIA_GPU)


@dataclass
class DemandUnit:
    """A count of identical resource requirements.

    ``pod_names_by_namespace`` optionally names the pods that will occupy the
    requested space and is used for deduplication.
    """

    resources: ResourceList = field(default_factory=ResourceList)
    count: int = 0
    pod_names_by_namespace: dict[str, list[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.resources, ResourceList):
            self.resources = ResourceList(self.resources)


@dataclass
class DemandSpec:
    """What a demand asks for and where.

    A long-lived demand is mutable and acts as a buffer of ready capacity in
    its instance group. ``zone``, when set, is where the demand must be met.
    """

    units: list[DemandUnit] = field(default_factory=list)
    instance_group: str = ""
    is_long_lived: bool = False
    enforce_single_zone_scheduling: bool = False
    zone: str | None = None


@dataclass
class DemandStatus:
    """The phase a demand is in.

    ``fulfilled_zone`` is the zone scaled up for a single-zone demand.
    """

    phase: DemandPhase = DemandPhase.EMPTY
    last_transition_time: datetime | None = None
    fulfilled_zone: str = ""

    def __post_init__(self) -> None:
        self.phase = DemandPhase(self.phase)


@dataclass
class Demand:
    """Currently unschedulable resources."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: DemandSpec = field(default_factory=DemandSpec)
    status: DemandStatus = field(default_factory=DemandStatus)

    def hub(self) -> None:
        """Mark this version as the conversion hub."""


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