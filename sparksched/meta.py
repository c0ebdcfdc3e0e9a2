"""Shared API machinery: quantities, object metadata, group/version naming and schemes."""

from __future__ import annotations

import copy as _copy
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from fractions import Fraction
from functools import total_ordering
from typing import Any

RESOURCE_RESERVATION_PLURAL = "resourcereservations"
GROUP_NAME = "sparkscheduler.palantir.com"
RESOURCE_RESERVATION_CRD_NAME = RESOURCE_RESERVATION_PLURAL + "." + GROUP_NAME
# Annotation holding the latest reservation spec on objects of older versions,
# so that round-trip conversions do not lose information.
RESERVATION_SPEC_ANNOTATION_KEY = GROUP_NAME + "/reservation-spec"

_NANO = 10**9

_BINARY_MULTIPLIERS = {
    "Ki": 2**10,
    "Mi": 2**20,
    "Gi": 2**30,
    "Ti": 2**40,
    "Pi": 2**50,
    "Ei": 2**60,
}
_BINARY_SUFFIXES = {exp: suffix for suffix, exp in
                    (("", 0), ("Ki", 10), ("Mi", 20), ("Gi", 30), ("Ti", 40), ("Pi", 50), ("Ei", 60))}

_DECIMAL_EXPONENTS = {
    "n": -9,
    "u": -6,
    "m": -3,
    "": 0,
    "k": 3,
    "M": 6,
    "G": 9,
    "T": 12,
    "P": 15,
    "E": 18,
}
_DECIMAL_SUFFIXES = {exp: suffix for suffix, exp in _DECIMAL_EXPONENTS.items()}

_NUMBER_RE = re.compile(r"([+-]?)(\d+\.?\d*|\.\d+)(.*)", re.S)
_EXPONENT_RE = re.compile(r"[eE][+-]?\d+")


class QuantityFormat(str, Enum):
    """How a quantity is written out."""

    DECIMAL_SI = "DecimalSI"
    BINARY_SI = "BinarySI"
    DECIMAL_EXPONENT = "DecimalExponent"


def _ceil_away_from_zero(value: Fraction) -> int:
    magnitude = -(-abs(value.numerator) // value.denominator)
    return -magnitude if value < 0 else magnitude


@total_ordering
class Quantity:
    """A fixed-point resource amount with nano precision, such as ``100m`` or ``2Gi``."""

    __slots__ = ("_nanos", "_format")

    def __init__(self, nanos: int = 0, format: QuantityFormat = QuantityFormat.DECIMAL_SI):
        self._nanos = int(nanos)
        self._format = QuantityFormat(format)

    @classmethod
    def parse(cls, text: str) -> Quantity:
        """Parse the textual form of a quantity; raise ValueError if it is malformed."""
        match = _NUMBER_RE.fullmatch(text)
        if match is None:
            raise ValueError(f"quantities must match the regular expression: {text!r}")
        sign, number, suffix = match.groups()
        whole, _, fraction = number.partition(".")
        amount = Fraction(int((whole or "0") + fraction), 10 ** len(fraction))
        if sign == "-":
            amount = -amount

        if suffix in _BINARY_MULTIPLIERS:
            multiplier = Fraction(_BINARY_MULTIPLIERS[suffix])
            fmt = QuantityFormat.BINARY_SI
        elif suffix in _DECIMAL_EXPONENTS:
            multiplier = Fraction(10) ** _DECIMAL_EXPONENTS[suffix]
            fmt = QuantityFormat.DECIMAL_SI
        elif _EXPONENT_RE.fullmatch(suffix):
            multiplier = Fraction(10) ** int(suffix[1:])
            fmt = QuantityFormat.DECIMAL_EXPONENT
        else:
            raise ValueError(f"unable to parse quantity's suffix: {text!r}")

        return cls(_ceil_away_from_zero(amount * multiplier * _NANO), fmt)

    @classmethod
    def from_int(cls, value: int, format: QuantityFormat) -> Quantity:
        """Build a quantity holding a whole number of units."""
        return cls(int(value) * _NANO, format)

    def copy(self) -> Quantity:
        return Quantity(self._nanos, self._format)

    @property
    def format(self) -> QuantityFormat:
        return self._format

    @property
    def nanos(self) -> int:
        return self._nanos

    @property
    def value(self) -> int:
        """Whole units, rounded away from zero."""
        return _ceil_away_from_zero(Fraction(self._nanos, _NANO))

    @property
    def milli_value(self) -> int:
        """Thousandths of a unit, rounded away from zero."""
        return _ceil_away_from_zero(Fraction(self._nanos, _NANO // 1000))

    def is_zero(self) -> bool:
        return self._nanos == 0

    def __str__(self) -> str:
        nanos = self._nanos
        if nanos == 0:
            return "0"
        sign = "-" if nanos < 0 else ""
        magnitude = abs(nanos)
        if (
            self._format is QuantityFormat.BINARY_SI
            and magnitude >= 1024 * _NANO
            and magnitude % _NANO == 0
        ):
            units, exponent = magnitude // _NANO, 0
            while units % 1024 == 0 and exponent < 60:
                units //= 1024
                exponent += 10
            return f"{sign}{units}{_BINARY_SUFFIXES[exponent]}"

        exponent = -9
        while magnitude % 1000 == 0 and exponent < 18:
            magnitude //= 1000
            exponent += 3
        if self._format is QuantityFormat.DECIMAL_EXPONENT:
            suffix = f"e{exponent}" if exponent else ""
        else:
            suffix = _DECIMAL_SUFFIXES[exponent]
        return f"{sign}{magnitude}{suffix}"

    def __repr__(self) -> str:
        return f"Quantity({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self._nanos == other._nanos

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self._nanos < other._nanos

    def __hash__(self) -> int:
        return hash(self._nanos)


def _format_time(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _parse_time(text: str) -> datetime:
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


@dataclass
class ObjectMeta:
    """Metadata every persisted object carries."""

    name: str = ""
    namespace: str = ""
    uid: str = ""
    resource_version: str = ""
    generation: int = 0
    creation_timestamp: datetime | None = None
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)

    def copy(self) -> ObjectMeta:
        """Return a deep copy whose maps can be changed independently."""
        return _copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form, leaving out empty fields."""
        data: dict[str, Any] = {}
        if self.name:
            data["name"] = self.name
        if self.namespace:
            data["namespace"] = self.namespace
        if self.uid:
            data["uid"] = self.uid
        if self.resource_version:
            data["resourceVersion"] = self.resource_version
        if self.generation:
            data["generation"] = self.generation
        if self.creation_timestamp is not None:
            data["creationTimestamp"] = _format_time(self.creation_timestamp)
        if self.labels:
            data["labels"] = dict(self.labels)
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ObjectMeta:
        data = data or {}
        timestamp = data.get("creationTimestamp")
        return cls(
            name=data.get("name", ""),
            namespace=data.get("namespace", ""),
            uid=data.get("uid", ""),
            resource_version=data.get("resourceVersion", ""),
            generation=int(data.get("generation", 0)),
            creation_timestamp=_parse_time(timestamp) if timestamp else None,
            labels=dict(data.get("labels") or {}),
            annotations=dict(data.get("annotations") or {}),
        )


@dataclass
class ListMeta:
    """Metadata carried by lists of objects."""

    resource_version: str = ""
    continue_token: str = ""
    remaining_item_count: int | None = None


@dataclass(frozen=True)
class GroupResource:
    group: str
    resource: str

    def __str__(self) -> str:
        return self.resource if not self.group else f"{self.resource}.{self.group}"


@dataclass(frozen=True)
class GroupKind:
    group: str
    kind: str

    def __str__(self) -> str:
        return self.kind if not self.group else f"{self.kind}.{self.group}"


@dataclass(frozen=True)
class GroupVersionResource:
    group: str
    version: str
    resource: str

    def group_resource(self) -> GroupResource:
        return GroupResource(self.group, self.resource)

    def __str__(self) -> str:
        return f"{self.group}/{self.version}, Resource={self.resource}"


@dataclass(frozen=True)
class GroupVersionKind:
    group: str
    version: str
    kind: str

    def group_kind(self) -> GroupKind:
        return GroupKind(self.group, self.kind)

    def __str__(self) -> str:
        return f"{self.group}/{self.version}, Kind={self.kind}"


@dataclass(frozen=True)
class GroupVersion:
    group: str
    version: str

    def with_resource(self, resource: str) -> GroupVersionResource:
        return GroupVersionResource(self.group, self.version, resource)

    def with_kind(self, kind: str) -> GroupVersionKind:
        return GroupVersionKind(self.group, self.version, kind)

    def __str__(self) -> str:
        return self.version if not self.group else f"{self.group}/{self.version}"


class Scheme:
    """Registry mapping group/version/kind to the class implementing it."""

    def __init__(self) -> None:
        self._types: dict[GroupVersionKind, type] = {}

    def add_known_types(self, group_version: GroupVersion, *args: type) -> None:
        """Register each class under its own name as kind within the group version."""
        for cls in args:
            gvk = group_version.with_kind(cls.__name__)
            existing = self._types.get(gvk)
            if existing is not None and existing is not cls:
                raise ValueError(
                    f"double registration of different types for {gvk}: "
                    f"{existing.__qualname__} and {cls.__qualname__}"
                )
            self._types[gvk] = cls

    def known_type(self, group_version_kind: GroupVersionKind) -> type:
        """Return the class registered for the kind; raise KeyError if there is none."""
        try:
            return self._types[group_version_kind]
        except KeyError:
            raise KeyError(f"no kind is registered for {group_version_kind}") from None

    def __contains__(self, group_version_kind: object) -> bool:
        return group_version_kind in self._types


class ConversionError(Exception):
    """Raised when an object cannot be converted between API versions."""

    def __init__(self, message: str, **params: Any) -> None:
        super().__init__(message)
        self.message = message
        self.params = params

    def __str__(self) -> str:
        if not self.params:
            return self.message
        details = ", ".join(f"{key}={value!r}" for key, value in self.params.items())
        return f"{self.message} ({details})"