"""Custom resource definitions for resource reservations, in their wire form."""

from __future__ import annotations

import copy
from typing import Any

from sparksched.meta import (
    GROUP_NAME,
    RESOURCE_RESERVATION_CRD_NAME,
    RESOURCE_RESERVATION_PLURAL,
)


def _printer_columns() -> list[dict[str, Any]]:
    return [
        {
            "name": "driver",
            "type": "string",
            "jsonPath": ".status.pods.driver",
            "description": "Pod name of the driver",
        }
    ]


def _status_schema() -> dict[str, Any]:
    return {
        "type": "object",
        "required": ["pods"],
        "properties": {
            "pods": {
                "type": "object",
                "additionalProperties": {"type": "string"},
            },
        },
    }


def _version(name: str, storage: bool, reservation_schema: dict[str, Any]) -> dict[str, Any]:
    return {
        "name": name,
        "served": True,
        "storage": storage,
        "additionalPrinterColumns": _printer_columns(),
        "schema": {
            "openAPIV3Schema": {
                "type": "object",
                "required": ["spec", "metadata"],
                "properties": {
                    "status": _status_schema(),
                    "spec": {
                        "type": "object",
                        "required": ["reservations"],
                        "properties": {
                            "reservations": {
                                "type": "object",
                                "additionalProperties": reservation_schema,
                            },
                        },
                    },
                },
            },
        },
    }


def _v1beta1_version() -> dict[str, Any]:
    return _version(
        "v1beta1",
        True,
        {
            "type": "object",
            "required": ["node", "cpu", "memory"],
            "properties": {
                "node": {"type": "string"},
                "cpu": {"type": "string"},
                "memory": {"type": "string"},
            },
        },
    )


def _v1beta2_version() -> dict[str, Any]:
    return _version(
        "v1beta2",
        False,
        {
            "type": "object",
            "required": ["node", "resources"],
            "properties": {
                "node": {"type": "string"},
                "resources": {
                    "type": "object",
                    "additionalProperties": {"type": "string"},
                },
            },
        },
    )


def _definition(version: dict[str, Any]) -> dict[str, Any]:
    return {
        "metadata": {"name": RESOURCE_RESERVATION_CRD_NAME},
        "spec": {
            "group": GROUP_NAME,
            "versions": [version],
            "scope": "Namespaced",
            "names": {
                "plural": RESOURCE_RESERVATION_PLURAL,
                "kind": "ResourceReservation",
                "shortNames": ["rr"],
                "categories": ["all"],
            },
        },
    }


def reservation_crd_v1beta1() -> dict[str, Any]:
    """Return a fresh definition serving only v1beta1."""
    return _definition(_v1beta1_version())


def reservation_crd_version_v1beta1() -> dict[str, Any]:
    """Return a fresh v1beta1 version entry, for inclusion in other definitions."""
    return _v1beta1_version()


def reservation_crd_v1beta2(webhook: dict[str, Any] | None, *args: dict[str, Any]) -> dict[str, Any]:
    """Return a definition serving v1beta2 plus the given versions.

    ``webhook`` is the client configuration of the conversion webhook, which
    must convert between v1beta2 and every version passed in ``args``.
    """
    definition = _definition(_v1beta2_version())
    webhook_conversion: dict[str, Any] = {"conversionReviewVersions": ["v1", "v1beta1"]}
    if webhook is not None:
        webhook_conversion["clientConfig"] = copy.deepcopy(webhook)
    definition["spec"]["conversion"] = {"strategy": "Webhook", "webhook": webhook_conversion}
    definition["spec"]["versions"].extend(copy.deepcopy(version) for version in args)
    return definition