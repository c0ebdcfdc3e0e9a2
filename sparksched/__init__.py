"""Resource reservation and scaler demand API types, version conversions and CRD definitions."""

__version__ = "0.1.0"

__all__ = [
    "meta",
    "reservation_v1beta1",
    "reservation_v1beta2",
    "demand_v1alpha1",
    "demand_v1alpha2",
    "crd_reservation",
    "crd_demand",
]