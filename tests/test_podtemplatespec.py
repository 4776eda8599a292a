import pytest

from jivakit import container
from jivakit.errors import BuildError
from jivakit.podtemplatespec import Builder, PodTemplateSpec


SAMPLE = {"persistent-volume": "PV", "application": "percona"}


@pytest.mark.parametrize(
    "name, expect_err", [("PVC1", False), ("", True)]
)
def test_with_name(name, expect_err):
    b = Builder().with_name(name)
    assert bool(b.errors) == expect_err
    if not expect_err:
        assert b.build().name == "PVC1"


def test_with_namespace_set():
    b = Builder().with_namespace("PVC1")
    assert b.errors == []
    assert b.build().namespace == "PVC1"


def test_with_namespace_missing():
    b = Builder().with_namespace("")
    assert len(b.errors) == 1
    with pytest.raises(BuildError):
        b.build()


def test_with_annotations_set():
    b = Builder().with_annotations(SAMPLE)
    assert b.errors == []
    assert b.build().annotations == SAMPLE


def test_with_annotations_missing():
    b = Builder().with_annotations({})
    assert len(b.errors) == 1
    with pytest.raises(BuildError):
        b.build()


def test_with_annotations_new_set():
    b = Builder().with_annotations_new(SAMPLE)
    assert b.errors == []
    assert b.build().annotations == SAMPLE


def test_with_annotations_new_missing():
    b = Builder().with_annotations_new({})
    assert len(b.errors) == 1
    with pytest.raises(BuildError):
        b.build()


def test_with_labels_set():
    b = Builder().with_labels(SAMPLE)
    assert b.errors == []
    assert b.build().labels == SAMPLE


def test_with_labels_missing():
    b = Builder().with_labels({})
    assert len(b.errors) == 1
    with pytest.raises(BuildError):
        b.build()


def test_with_labels_new_set():
    b = Builder().with_labels_new(SAMPLE)
    assert b.errors == []
    assert b.build().labels == SAMPLE


def test_with_labels_new_missing():
    b = Builder().with_labels_new({})
    assert len(b.errors) == 1
    with pytest.raises(BuildError):
        b.build()


def test_with_affinity_set():
    b = Builder().with_affinity({"nodeAffinity": {}})
    assert b.errors == []
    assert b.build().affinity == {"nodeAffinity": {}}


def test_with_affinity_missing():
    b = Builder().with_affinity(None)
    assert len(b.errors) == 1
    with pytest.raises(BuildError):
        b.build()


def test_with_container_builders():
    b = Builder().with_container_builders(container.Builder())
    assert b.errors == []
    assert len(b.build().containers) == 1


def test_with_container_builders_none():
    b = Builder().with_container_builders()
    assert len(b.errors) == 1


def test_with_container_builders_new():
    b = Builder().with_container_builders_new(container.Builder())
    assert b.errors == []


def test_with_container_builders_new_none():
    b = Builder().with_container_builders_new()
    assert len(b.errors) == 1


def test_with_tolerations():
    b = Builder().with_tolerations({})
    assert b.errors == []
    b.with_tolerations({"key": "a"})
    assert b.build().tolerations == [{}, {"key": "a"}]


def test_with_tolerations_empty():
    assert len(Builder().with_tolerations(*[]).errors) == 1


def test_with_tolerations_new():
    b = Builder().with_tolerations({"key": "a"}).with_tolerations_new({"key": "b"})
    assert b.errors == []
    assert b.build().tolerations == [{"key": "b"}]


def test_with_tolerations_new_empty():
    assert len(Builder().with_tolerations_new(*[]).errors) == 1


def test_labels_merge_and_reset():
    b = Builder().with_labels({"a": "1"}).with_labels({"b": "2"})
    assert b.build().labels == {"a": "1", "b": "2"}
    b.with_labels_new({"c": "3"})
    assert b.build().labels == {"c": "3"}


def test_annotations_are_copied():
    source = {"a": "1"}
    b = Builder().with_annotations_new(source)
    source["b"] = "2"
    assert b.build().annotations == {"a": "1"}


def test_node_selector_merge():
    b = Builder().with_node_selector({"zone": "a"}).with_node_selector({"disk": "ssd"})
    assert b.build().node_selector == {"zone": "a", "disk": "ssd"}
    assert len(Builder().with_node_selector({}).errors) == 1
    assert len(Builder().with_node_selector_new({}).errors) == 1


def test_service_account_and_priority_class():
    spec = (
        Builder()
        .with_service_account_name("jiva-sa")
        .with_priority_class_name("high")
        .build()
    )
    assert spec.service_account_name == "jiva-sa"
    assert spec.priority_class_name == "high"
    assert len(Builder().with_service_account_name("").errors) == 1
    assert len(Builder().with_priority_class_name("").errors) == 1


def test_build_full_template():
    spec = (
        Builder()
        .with_name("tmpl")
        .with_namespace("openebs")
        .with_container_builders(container.Builder().with_name("ctrl").with_image("img:1"))
        .build()
    )
    assert isinstance(spec, PodTemplateSpec)
    assert spec.name == "tmpl"
    assert spec.namespace == "openebs"
    assert [c.name for c in spec.containers] == ["ctrl"]
    assert spec.containers[0].image == "img:1"


def test_build_raises_with_errors():
    b = Builder().with_name("").with_namespace("")
    with pytest.raises(BuildError) as info:
        b.build()
    assert len(info.value.errors) == 2
    assert "missing name" in str(info.value)


def test_failing_container_builder_recorded():
    bad = container.Builder().with_name("")
    b = Builder().with_container_builders(bad)
    assert len(b.errors) == 1
    assert "failed to build podtemplatespec" in str(b.errors[0])
    with pytest.raises(BuildError):
        b.build()


def test_failing_container_builder_new_keeps_previous():
    b = Builder().with_container_builders(container.Builder().with_name("keep"))
    b.with_container_builders_new(container.Builder().with_image(""))
    assert len(b.errors) == 1
    assert [c.name for c in b.template.containers] == ["keep"]