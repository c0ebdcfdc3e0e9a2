"""Resource reservations, version v1beta2: the storage version."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sparksched.meta import (
    GROUP_NAME,
    GroupResource,
    GroupVersion,
    ListMeta,
    ObjectMeta,
    Quantity,
    QuantityFormat,
    Scheme,
)

RESOURCE_CPU = "cpu"
RESOURCE_MEMORY = "memory"
RESOURCE_NVIDIA_GPU = "nvidia.com/gpu"

# Resources explicitly used for scheduling in this version.
SUPPORTED_RESOURCE_TYPES = (RESOURCE_CPU, RESOURCE_MEMORY, RESOURCE_NVIDIA_GPU)

SCHEME_GROUP_VERSION = GroupVersion(GROUP_NAME, "v1beta2")


class ResourceList(dict):
    """Maps a resource name to a quantity, e.g. ``{"cpu": Quantity("1")}``."""

    def cpu(self) -> Quantity:
        """Reserved cores, or zero when none are specified."""
        found = self.get(RESOURCE_CPU)
        return found if found is not None else Quantity.from_int(0, QuantityFormat.DECIMAL_SI)

    def memory(self) -> Quantity:
        """Reserved memory, or zero when none is specified."""
        found = self.get(RESOURCE_MEMORY)
        return found if found is not None else Quantity.from_int(0, QuantityFormat.BINARY_SI)

    def nvidia_gpu(self) -> Quantity:
        """Reserved Nvidia GPUs, or zero when none are specified."""
        found = self.get(RESOURCE_NVIDIA_GPU)
        return found if found is not None else Quantity.from_int(0, QuantityFormat.DECIMAL_SI)


@dataclass
class Reservation:
    """The reserved node and resources for one process of an application."""

    node: str = ""
    resources: ResourceList = field(default_factory=ResourceList)

    def __post_init__(self) -> None:
        if not isinstance(self.resources, ResourceList):
            self.resources = ResourceList(self.resources)


@dataclass
class ResourceReservationSpec:
    """Reservations for the driver and executors of an application."""

    reservations: dict[str, Reservation] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form."""
        return {
            "reservations": {
                key: {
                    "node": reservation.node,
                    "resources": {
                        name: str(quantity) for name, quantity in reservation.resources.items()
                    },
                }
                for key, reservation in self.reservations.items()
            }
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ResourceReservationSpec:
        """Build from the wire form; raise ValueError on a malformed quantity."""
        data = data or {}
        reservations = {}
        for key, entry in (data.get("reservations") or {}).items():
            entry = entry or {}
            resources = ResourceList(
                (name, Quantity.parse(text))
                for name, text in (entry.get("resources") or {}).items()
            )
            reservations[key] = Reservation(node=entry.get("node", ""), resources=resources)
        return cls(reservations=reservations)


@dataclass
class ResourceReservationStatus:
    """Which reservations are bound to which pod names."""

    pods: dict[str, str] = field(default_factory=dict)


@dataclass
class ResourceReservation:
    """A collection of reservations for a distributed application."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ResourceReservationSpec = field(default_factory=ResourceReservationSpec)
    status: ResourceReservationStatus = field(default_factory=ResourceReservationStatus)

    def hub(self) -> GroupVersion:
        """Return the group version that serves as the conversion hub."""
        return SCHEME_GROUP_VERSION


@dataclass
class ResourceReservationList:
    """A list of resource reservations."""

    metadata: ListMeta = field(default_factory=ListMeta)
    items: list[ResourceReservation] = field(default_factory=list)


def resource(name: str) -> GroupResource:
    """Return the group resource for a resource name in this group version."""
    return SCHEME_GROUP_VERSION.with_resource(name).group_resource()


def add_to_scheme(scheme: Scheme) -> None:
    """Register this version's kinds with the scheme."""
    scheme.add_known_types(SCHEME_GROUP_VERSION, ResourceReservation, ResourceReservationList)