# sparksched

API types for a Spark-aware cluster scheduler: resource reservations
(group `sparkscheduler.palantir.com`, versions `v1beta1` and `v1beta2`) and
scaler demands (group `scaler.palantir.com`, versions `v1alpha1` and
`v1alpha2`). The package gives you:

- plain Python dataclasses for the resources, with fixed-point resource
  amounts (`Quantity`);
- conversion between each older version and its storage ("hub") version;
- CustomResourceDefinition documents as plain dictionaries, ready to be
  serialised and applied;
- a small `Scheme` registry of known kinds per group and version.

It has no runtime dependencies.

## Install

```
pip install .
pip install ".[test]"   # with pytest
```

## Modules

| Module | What it holds |
| --- | --- |
| `sparksched.meta` | `Quantity`, `QuantityFormat`, `ObjectMeta`, `ListMeta`, `GroupVersion`, `GroupResource`, `GroupKind`, `GroupVersionResource`, `GroupVersionKind`, `Scheme`, `ConversionError` |
| `sparksched.reservation_v1beta2` | storage version of `ResourceReservation`; `ResourceList` with `cpu()`, `memory()`, `nvidia_gpu()`; `ResourceReservationSpec.to_dict` / `from_dict` |
| `sparksched.reservation_v1beta1` | older `ResourceReservation` (CPU and memory only) with `convert_to` / `convert_from` |
| `sparksched.demand_v1alpha2` | storage version of `Demand`, `DemandPhase`, `ResourceList` |
| `sparksched.demand_v1alpha1` | older `Demand` (CPU, memory and GPU fields) with `convert_to` / `convert_from` |
| `sparksched.crd_reservation` | CRD definitions for resource reservations |
| `sparksched.crd_demand` | CRD definitions for demands |

Each version module also has `resource(name)` and `add_to_scheme(scheme)`;
the demand modules add `kind(name)`.

## Quantities

```python
from sparksched.meta import Quantity, QuantityFormat

Quantity.parse("100m").milli_value        # 100
str(Quantity.parse("2048Mi"))             # "2Gi"
Quantity.from_int(3, QuantityFormat.DECIMAL_SI).value   # 3
Quantity.parse("1") < Quantity.parse("1500m")           # True
```

`Quantity.parse` raises `ValueError` on malformed text.

## Converting reservations

A `v1beta1` reservation only knows CPU and memory. Converting from the storage
version keeps the full spec as JSON in the annotation
`sparkscheduler.palantir.com/reservation-spec`, so converting back restores any
other resources, such as GPUs, for reservations that still exist; the
annotation is dropped from the result.

```python
from sparksched import reservation_v1beta1 as v1, reservation_v1beta2 as v2
from sparksched.meta import Quantity

stored = v2.ResourceReservation()
stored.spec.reservations["driver"] = v2.Reservation(
    node="node-a",
    resources=v2.ResourceList({
        "cpu": Quantity.parse("1"),
        "memory": Quantity.parse("2"),
        "nvidia.com/gpu": Quantity.parse("3"),
    }),
)

old = v1.ResourceReservation()
old.convert_from(stored)          # cpu and memory, spec kept in an annotation

back = v2.ResourceReservation()
old.convert_to(back)              # the GPU count is restored from the annotation
```

## Converting demands

`demand_v1alpha1.Demand.convert_to` fills a `demand_v1alpha2.Demand`, putting
each unit's CPU, memory and GPU into its `ResourceList`. `convert_from` goes the
other way.

`ConversionError` is raised when a conversion is given an object of the wrong
type, when a `v1alpha2` demand unit holds a resource that `v1alpha1` cannot
represent, when a `v1alpha1` phase is not a known `DemandPhase`, and when the
stored reservation spec annotation cannot be read.

## CRD definitions

```python
from sparksched.crd_reservation import reservation_crd_v1beta2, reservation_crd_version_v1beta1
from sparksched.crd_demand import demand_crd_name, demand_crd_v1alpha2, demand_crd_version_v1alpha1

crd = reservation_crd_v1beta2(None, reservation_crd_version_v1beta1())
demand_crd = demand_crd_v1alpha2(None, demand_crd_version_v1alpha1())
print(demand_crd_name())          # demands.scaler.palantir.com
```

The first argument is the conversion webhook's client configuration (a
dictionary) or `None`. `demand_crd_v1alpha2` marks the extra versions as
non-storage. Each call returns a fresh copy, so changing one does not affect
the next.

## Registering types

```python
from sparksched.meta import Scheme
from sparksched import reservation_v1beta2, demand_v1alpha2

scheme = Scheme()
reservation_v1beta2.add_to_scheme(scheme)
demand_v1alpha2.add_to_scheme(scheme)
scheme.known_type(reservation_v1beta2.SCHEME_GROUP_VERSION.with_kind("ResourceReservation"))
```

Registering a different class under the same kind raises `ValueError`;
looking up an unknown kind raises `KeyError`.

## What it does not do

The package only models the objects. It does not talk to a cluster API server,
does not serve a conversion webhook, does not serialise whole objects to JSON
(only `ObjectMeta` and the `v1beta2` reservation spec have `to_dict`), and does
not decide which nodes drivers and executors are placed on.

## Tests

```
pytest
```