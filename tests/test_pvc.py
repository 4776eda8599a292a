from decimal import Decimal

import pytest

from jivakit.errors import BuildError
from jivakit.pvc import PVC, Builder, PVCList, contains_name, parse_quantity


@pytest.mark.parametrize(
    "name, expect_err", [("PVC1", True is False), ("", True)]
)
def test_with_name(name, expect_err):
    b = Builder().with_name(name)
    assert (len(b.errors) > 0) == expect_err


def test_with_name_sets_name():
    obj = Builder().with_name("PVC1").build()
    assert obj["metadata"]["name"] == "PVC1"


@pytest.mark.parametrize("namespace", ["jiva-ns", ""])
def test_with_namespace_never_errors(namespace):
    b = Builder().with_namespace(namespace)
    assert b.errors == []


def test_with_namespace_defaults():
    assert Builder().with_namespace("").build()["metadata"]["namespace"] == "default"
    assert Builder().with_namespace("jiva-ns").build()["metadata"]["namespace"] == "jiva-ns"


@pytest.mark.parametrize(
    "annotations, expect_err",
    [({"persistent-volume": "PV", "application": "percona"}, False), ({}, True)],
)
def test_with_annotations(annotations, expect_err):
    b = Builder().with_annotations(annotations)
    assert (len(b.errors) > 0) == expect_err


@pytest.mark.parametrize(
    "labels, expect_err",
    [({"persistent-volume": "PV", "application": "percona"}, False), ({}, True)],
)
def test_with_labels(labels, expect_err):
    b = Builder().with_labels(labels)
    assert (len(b.errors) > 0) == expect_err


def test_with_labels_merges():
    obj = Builder().with_labels({"a": "1"}).with_labels({"b": "2"}).build()
    assert obj["metadata"]["labels"] == {"a": "1", "b": "2"}


@pytest.mark.parametrize(
    "labels, expect_err",
    [
        ({"persistent-volume": "PV", "application": "percona"}, False),
        ({}, True),
        (None, True),
    ],
)
def test_with_labels_new(labels, expect_err):
    b = Builder().with_labels_new(labels)
    assert (len(b.errors) > 0) == expect_err


def test_with_labels_new_replaces_and_copies():
    labels = {"b": "2"}
    obj = Builder().with_labels({"a": "1"}).with_labels_new(labels).build()
    labels["c"] = "3"
    assert obj["metadata"]["labels"] == {"b": "2"}


@pytest.mark.parametrize(
    "modes, expect_err", [(["ReadWriteOnce", "ReadOnlyMany"], False), ([], True)]
)
def test_with_access_modes(modes, expect_err):
    b = Builder().with_access_modes(modes)
    assert (len(b.errors) > 0) == expect_err


@pytest.mark.parametrize("sc, expect_err", [("single-replica", False), ("", True)])
def test_with_storage_class(sc, expect_err):
    b = Builder().with_storage_class(sc)
    assert (len(b.errors) > 0) == expect_err


@pytest.mark.parametrize("capacity, expect_err", [("5G", False), ("", True)])
def test_with_capacity(capacity, expect_err):
    b = Builder().with_capacity(capacity)
    assert (len(b.errors) > 0) == expect_err


def test_build_with_correct_details():
    obj = Builder().with_name("PVC1").with_capacity("10Ti").build()
    assert obj == {
        "metadata": {"name": "PVC1"},
        "spec": {"resources": {"requests": {"storage": parse_quantity("10Ti")}}},
    }


def test_build_with_error():
    with pytest.raises(BuildError) as info:
        Builder().with_name("").with_capacity("500Gi").build()
    assert len(info.value.errors) == 1
    assert "missing PVC name" in str(info.value)


def test_parse_quantity_values():
    assert parse_quantity("10Ti") == 10 * 2**40
    assert parse_quantity("5G") == 5_000_000_000
    assert parse_quantity("100m") == Decimal("0.1")
    assert parse_quantity("1e3") == 1000


@pytest.mark.parametrize("text", ["", "abc", "5X", "1e"])
def test_parse_quantity_invalid(text):
    with pytest.raises(ValueError):
        parse_quantity(text)


def test_pvc_predicates():
    bound = PVC({"metadata": {"name": "data-claim"}, "status": {"phase": "Bound"}})
    pending = PVC({"metadata": {"name": "other"}, "status": {"phase": "Pending"}})
    assert bound.is_bound() is True
    assert pending.is_bound() is False
    assert PVC(None).is_nil() is True
    assert bound.is_nil() is False
    assert contains_name("data")(bound) is True
    assert contains_name("data")(pending) is False


def test_pvc_list():
    objs = [{"metadata": {"name": "a"}}, {"metadata": {"name": "b"}}]
    plist = PVCList(PVC(o) for o in objs)
    assert len(plist) == 2
    assert plist.to_api_list() == {"items": objs}