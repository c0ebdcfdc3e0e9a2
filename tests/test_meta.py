from datetime import datetime, timezone

import pytest

from sparksched.meta import (
    GROUP_NAME,
    RESOURCE_RESERVATION_CRD_NAME,
    RESOURCE_RESERVATION_PLURAL,
    ConversionError,
    GroupKind,
    GroupResource,
    GroupVersion,
    ObjectMeta,
    Quantity,
    QuantityFormat,
    Scheme,
)


@pytest.mark.parametrize(
    "text",
    ["0", "1", "2", "3", "100m", "1500m", "5n", "1k", "1Gi", "512Mi", "1e3", "-100m"],
)
def test_canonical_text_round_trips(text):
    assert str(Quantity.parse(text)) == text


@pytest.mark.parametrize(
    "left, right",
    [("1Ki", "1024"), ("1k", "1000"), ("1e3", "1k"), ("0.5", "500m"), ("1Mi", "1024Ki")],
)
def test_equal_amounts_compare_equal_across_formats(left, right):
    assert Quantity.parse(left) == Quantity.parse(right)
    assert hash(Quantity.parse(left)) == hash(Quantity.parse(right))


def test_parse_picks_format_from_suffix():
    assert Quantity.parse("1Gi").format is QuantityFormat.BINARY_SI
    assert Quantity.parse("1k").format is QuantityFormat.DECIMAL_SI
    assert Quantity.parse("1e3").format is QuantityFormat.DECIMAL_EXPONENT


def test_from_int_matches_parse():
    assert Quantity.from_int(1024, QuantityFormat.BINARY_SI) == Quantity.parse("1Ki")
    assert str(Quantity.from_int(2, QuantityFormat.BINARY_SI)) == "2"
    assert str(Quantity.from_int(2048, QuantityFormat.BINARY_SI)) == "2Ki"


def test_ordering():
    assert Quantity.parse("100m") < Quantity.parse("1")
    assert Quantity.parse("2Gi") > Quantity.parse("2G")
    assert sorted([Quantity.parse("3"), Quantity.parse("1"), Quantity.parse("2")]) == [
        Quantity.parse("1"),
        Quantity.parse("2"),
        Quantity.parse("3"),
    ]


def test_value_and_milli_value():
    quantity = Quantity.parse("1500m")
    assert quantity.milli_value == 1500
    assert quantity.value == 2


def test_sub_nano_precision_rounds_up():
    assert Quantity.parse("0.1234567891") > Quantity.parse("0.123456789")


@pytest.mark.parametrize("text", ["", "abc", "1X", "1.2.3", " 1", "1 ", "Gi"])
def test_malformed_quantities_are_rejected(text):
    with pytest.raises(ValueError):
        Quantity.parse(text)


def test_copy_is_equal_but_distinct():
    original = Quantity.parse("3Gi")
    duplicate = original.copy()
    assert duplicate == original
    assert duplicate is not original
    assert duplicate.format is original.format
    assert str(duplicate) == str(original)


def test_zero_quantity():
    zero = Quantity.from_int(0, QuantityFormat.DECIMAL_SI)
    assert zero.is_zero()
    assert zero == Quantity.parse("0")
    assert not Quantity.parse("1m").is_zero()


def test_object_meta_round_trip():
    meta = ObjectMeta(
        name="app",
        namespace="ns",
        uid="uid-1",
        resource_version="7",
        generation=3,
        creation_timestamp=datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        labels={"app-id": "a1"},
        annotations={"k": "v"},
    )
    data = meta.to_dict()
    assert data["annotations"] == {"k": "v"}
    assert data["labels"] == {"app-id": "a1"}
    assert ObjectMeta.from_dict(data) == meta


def test_empty_object_meta_serialises_to_nothing():
    assert ObjectMeta().to_dict() == {}
    assert ObjectMeta.from_dict({}) == ObjectMeta()
    assert ObjectMeta.from_dict(None) == ObjectMeta()


def test_object_meta_copy_is_independent():
    meta = ObjectMeta(name="app", annotations={"k": "v"})
    duplicate = meta.copy()
    duplicate.annotations.pop("k")
    duplicate.labels["x"] = "y"
    assert meta.annotations == {"k": "v"}
    assert meta.labels == {}
    assert duplicate.name == "app"


def test_crd_name_from_group_resource():
    gv = GroupVersion(GROUP_NAME, "v1beta1")
    gr = gv.with_resource(RESOURCE_RESERVATION_PLURAL).group_resource()
    assert gr == GroupResource(GROUP_NAME, RESOURCE_RESERVATION_PLURAL)
    assert str(gr) == RESOURCE_RESERVATION_CRD_NAME


def test_group_version_strings():
    assert str(GroupVersion("", "v1")) == "v1"
    assert str(GroupVersion(GROUP_NAME, "v1beta2")) == GROUP_NAME + "/v1beta2"
    assert str(GroupResource("", "pods")) == "pods"


def test_with_kind_and_group_kind():
    gvk = GroupVersion(GROUP_NAME, "v1beta2").with_kind("ResourceReservation")
    assert gvk.version == "v1beta2"
    assert gvk.group_kind() == GroupKind(GROUP_NAME, "ResourceReservation")


class Widget:
    pass


class Gadget:
    pass


def test_scheme_registers_by_class_name():
    scheme = Scheme()
    gv = GroupVersion(GROUP_NAME, "v1beta1")
    scheme.add_known_types(gv, Widget, Gadget)
    assert scheme.known_type(gv.with_kind("Widget")) is Widget
    assert scheme.known_type(gv.with_kind("Gadget")) is Gadget
    assert gv.with_kind("Widget") in scheme


def test_scheme_unknown_kind_raises():
    scheme = Scheme()
    with pytest.raises(KeyError):
        scheme.known_type(GroupVersion(GROUP_NAME, "v1").with_kind("Widget"))


def test_scheme_reregistering_same_class_is_allowed_but_conflicts_are_not():
    scheme = Scheme()
    gv = GroupVersion(GROUP_NAME, "v1")
    scheme.add_known_types(gv, Widget)
    scheme.add_known_types(gv, Widget)
    assert scheme.known_type(gv.with_kind("Widget")) is Widget

    Other = type("Widget", (), {})
    with pytest.raises(ValueError):
        scheme.add_known_types(gv, Other)


def test_conversion_error_keeps_params():
    error = ConversionError("dst type not as expected", expectedType="A", actualType="B")
    assert error.message == "dst type not as expected"
    assert error.params == {"expectedType": "A", "actualType": "B"}
    assert "dst type not as expected" in str(error)
    with pytest.raises(ConversionError, match="not as expected"):
        raise error