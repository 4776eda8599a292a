import pytest

from jivakit.errors import BuildError


def test_message_is_string_form():
    err = BuildError("container validation failed", [])
    assert str(err) == "container validation failed"
    assert err.message == "container validation failed"


def test_errors_are_kept_in_order():
    first = ValueError("first")
    second = ValueError("second")
    err = BuildError("failed", [first, second])
    assert err.errors == [first, second]


def test_errors_default_to_empty():
    err = BuildError("failed")
    assert err.errors == []


def test_errors_are_copied_from_input():
    source = [ValueError("a")]
    err = BuildError("failed", source)
    source.append(ValueError("b"))
    assert len(err.errors) == 1


def test_can_be_raised_and_caught():
    cause = KeyError("k")
    err = BuildError("boom", [cause])
    with pytest.raises(BuildError) as info:
        raise err
    assert info.value is err
    assert info.value.message == "boom"
    assert info.value.errors == [cause]