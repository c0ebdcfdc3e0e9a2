"""Resource reservations, version v1beta1, convertible to and from v1beta2."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from sparksched import reservation_v1beta2 as v1beta2
from sparksched.meta import (
    GROUP_NAME,
    RESERVATION_SPEC_ANNOTATION_KEY,
    ConversionError,
    GroupResource,
    GroupVersion,
    ListMeta,
    ObjectMeta,
    Quantity,
    Scheme,
)

INSTANCE_GROUP_LABEL = "instance-group"
APP_ID_LABEL = "app-id"

SCHEME_GROUP_VERSION = GroupVersion(GROUP_NAME, "v1beta1")


def _type_name(cls: type) -> str:
    return f"{cls.__module__.rsplit('.', 1)[-1]}.{cls.__qualname__}"


@dataclass
class Reservation:
    """The reserved node, cores and memory for one process of an application."""

    node: str = ""
    cpu: Quantity = field(default_factory=Quantity)
    memory: Quantity = field(default_factory=Quantity)


@dataclass
class ResourceReservationSpec:
    """Reservations for the driver and executors of an application."""

    reservations: dict[str, Reservation] = field(default_factory=dict)


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

    def convert_to(self, dst: v1beta2.ResourceReservation) -> None:
        """Fill the storage-version object from this one.

        Values come from this object first; resources it cannot hold are
        taken from the spec stored in the annotations.
        """
        if not isinstance(dst, v1beta2.ResourceReservation):
            raise ConversionError(
                "dst type not as expected",
                expectedType=_type_name(v1beta2.ResourceReservation),
                actualType=_type_name(type(dst)),
            )

        dst.metadata = self.metadata.copy()
        dst.metadata.annotations.pop(RESERVATION_SPEC_ANNOTATION_KEY, None)

        dst.status.pods = dict(self.status.pods)

        dst.spec.reservations = {
            key: v1beta2.Reservation(
                node=value.node,
                resources=v1beta2.ResourceList(
                    {
                        v1beta2.RESOURCE_CPU: value.cpu.copy(),
                        v1beta2.RESOURCE_MEMORY: value.memory.copy(),
                    }
                ),
            )
            for key, value in self.spec.reservations.items()
        }

        stored = self.metadata.annotations.get(RESERVATION_SPEC_ANNOTATION_KEY)
        if stored is None:
            return
        try:
            stored_spec = v1beta2.ResourceReservationSpec.from_dict(json.loads(stored))
        except (ValueError, TypeError, AttributeError) as exc:
            raise ConversionError(
                "unable to read the stored reservation spec", annotation=RESERVATION_SPEC_ANNOTATION_KEY
            ) from exc

        for key, stored_reservation in stored_spec.reservations.items():
            target = dst.spec.reservations.get(key)
            if target is None:
                continue
            for name, quantity in stored_reservation.resources.items():
                if name not in target.resources:
                    target.resources[name] = quantity.copy()

    def convert_from(self, src: v1beta2.ResourceReservation) -> None:
        """Fill this object from the storage version, keeping its full spec in the annotations."""
        if not isinstance(src, v1beta2.ResourceReservation):
            raise ConversionError(
                "src type not as expected",
                expectedType=_type_name(v1beta2.ResourceReservation),
                actualType=_type_name(type(src)),
            )

        self.metadata = src.metadata.copy()
        self.metadata.annotations[RESERVATION_SPEC_ANNOTATION_KEY] = json.dumps(
            src.spec.to_dict(), separators=(",", ":")
        )
        self.status.pods = dict(src.status.pods)
        self.spec.reservations = {
            key: Reservation(
                node=value.node,
                cpu=value.resources.cpu().copy(),
                memory=value.resources.memory().copy(),
            )
            for key, value in src.spec.reservations.items()
        }


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