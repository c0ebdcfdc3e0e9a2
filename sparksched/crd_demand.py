"""Custom resource definitions for scaler demands, in their wire form."""

from __future__ import annotations

import copy
from typing import Any

from sparksched import demand_v1alpha1 as v1alpha1
from sparksched import demand_v1alpha2 as v1alpha2
from sparksched.meta import GroupVersionResource

_PLURAL_NAME = "demands"


def demand_crd_name() -> str:
    """Return the fully qualified name of the demand resource."""
    return str(demand_group_version_resource_v1alpha2().group_resource())


def demand_group_version_resource_v1alpha1() -> GroupVersionResource:
    """Return the group version resource of v1alpha1 demands."""
    return v1alpha1.SCHEME_GROUP_VERSION.with_resource(_PLURAL_NAME)


def demand_group_version_resource_v1alpha2() -> GroupVersionResource:
    """Return the group version resource of v1alpha2 demands."""
    return v1alpha2.SCHEME_GROUP_VERSION.with_resource(_PLURAL_NAME)


def _phase_enum() -> list[str]:
    return [phase.value for phase in v1alpha2.ALL_DEMAND_PHASES]


def _non_empty_string() -> dict[str, Any]:
    return {"type": "string", "minLength": 1}


def _column(name: str, type_: str, json_path: str, description: str) -> dict[str, Any]:
    return {"name": name, "type": type_, "jsonPath": json_path, "description": description}


def _leading_columns() -> list[dict[str, Any]]:
    return [
        _column("status", "string", ".status.phase", "The phase of the Demand request"),
        _column(
            "instance group", "string", ".spec.instance-group",
            "The instance group for the Demand request",
        ),
        _column(
            "long lived", "boolean", ".spec.is-long-lived",
            "The lifecycle description of the Demand request",
        ),
    ]


def _units_column() -> dict[str, Any]:
    column = _column("units", "string", ".spec.units", "The units of the Demand request")
    column["priority"] = 1
    return column


def _status_properties() -> dict[str, Any]:
    return {
        "phase": {"type": "string", "enum": _phase_enum()},
        "last-transition-time": {"type": "string", "format": "date-time", "nullable": True},
    }


def _schema(status_properties: dict[str, Any], spec_properties: dict[str, Any],
            unit_schema: dict[str, Any]) -> dict[str, Any]:
    spec_properties = dict(spec_properties)
    spec_properties["units"] = {"type": "array", "items": unit_schema}
    return {
        "openAPIV3Schema": {
            "type": "object",
            "required": ["spec", "metadata"],
            "properties": {
                "status": {
                    "type": "object",
                    "required": ["phase"],
                    "properties": status_properties,
                },
                "spec": {
                    "type": "object",
                    "required": ["units", "instance-group"],
                    "properties": spec_properties,
                },
            },
        },
    }


def _v1alpha1_version() -> dict[str, Any]:
    unit_schema = {
        "type": "object",
        "required": ["count", "cpu", "memory"],
        "properties": {
            "count": {"type": "integer", "minimum": 1},
            "cpu": _non_empty_string(),
            "memory": _non_empty_string(),
            "gpu": _non_empty_string(),
        },
    }
    spec_properties = {
        "instance-group": _non_empty_string(),
        "is-long-lived": {"type": "boolean"},
    }
    return {
        "name": v1alpha1.SCHEME_GROUP_VERSION.version,
        "served": True,
        "storage": True,
        "schema": _schema(_status_properties(), spec_properties, unit_schema),
        "subresources": {"status": {}},
        "additionalPrinterColumns": _leading_columns() + [_units_column()],
    }


def _v1alpha2_version() -> dict[str, Any]:
    status_properties = _status_properties()
    status_properties["fulfilled-zone"] = {"type": "string", "nullable": True}
    unit_schema = {
        "type": "object",
        "required": ["count", "resources"],
        "properties": {
            "resources": {
                "type": "object",
                "properties": {name: _non_empty_string() for name in v1alpha2.ALL_SUPPORTED_RESOURCES},
            },
            "count": {"type": "integer", "minimum": 1},
            "pod-names-by-namespace": {"type": "object"},
        },
    }
    spec_properties = {
        "instance-group": _non_empty_string(),
        "is-long-lived": {"type": "boolean"},
        "enforce-single-zone-scheduling": {"type": "boolean"},
        "zone": {"type": "string"},
    }
    columns = _leading_columns() + [
        _column(
            "single zone", "boolean", ".spec.enforce-single-zone-scheduling",
            "The zone distribution description of the Demand request",
        ),
        _column(
            "zone", "string", ".spec.zone",
            "The zone where the demand should be fulfilled if specified",
        ),
        _column(
            "fulfilled zone", "boolean", ".status.fulfilled-zone",
            "The zone scaled to satisfy the single zone Demand request",
        ),
        _units_column(),
    ]
    return {
        "name": v1alpha2.SCHEME_GROUP_VERSION.version,
        "served": True,
        "storage": True,
        "subresources": {"status": {}},
        "schema": _schema(status_properties, spec_properties, unit_schema),
        "additionalPrinterColumns": columns,
    }


def _definition(group: str, version: dict[str, Any]) -> dict[str, Any]:
    return {
        "metadata": {"name": demand_crd_name()},
        "spec": {
            "group": group,
            "versions": [version],
            "scope": "Namespaced",
            "names": {
                "plural": _PLURAL_NAME,
                "singular": "demand",
                "kind": "Demand",
                "shortNames": ["dem"],
                "categories": ["all"],
            },
        },
    }


def demand_crd_v1alpha1() -> dict[str, Any]:
    """Return a fresh definition serving only v1alpha1."""
    return _definition(v1alpha1.SCHEME_GROUP_VERSION.group, _v1alpha1_version())


def demand_crd_version_v1alpha1() -> dict[str, Any]:
    """Return a fresh v1alpha1 version entry, for inclusion in other definitions."""
    return _v1alpha1_version()


def demand_crd_v1alpha2(webhook: dict[str, Any] | None, *args: dict[str, Any]) -> dict[str, Any]:
    """Return a definition storing v1alpha2 and also serving the given versions.

    ``webhook`` is the client configuration of the conversion webhook, which
    must convert between v1alpha2 and every version passed in ``args``. The
    extra versions are added as non-storage versions.
    """
    definition = _definition(v1alpha2.SCHEME_GROUP_VERSION.group, _v1alpha2_version())
    webhook_conversion: dict[str, Any] = {"conversionReviewVersions": ["v1", "v1beta1"]}
    if webhook is not None:
        webhook_conversion["clientConfig"] = copy.deepcopy(webhook)
    definition["spec"]["conversion"] = {"strategy": "Webhook", "webhook": webhook_conversion}
    for version in args:
        extra = copy.deepcopy(version)
        extra["storage"] = False
        definition["spec"]["versions"].append(extra)
    return definition