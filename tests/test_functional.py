import pytest

from lifetrack.functional import Left, Nothing, Right, Some


def test_maybe_map():
    assert Some(5).map(lambda x: x * 2).get_or_else(0) == 10
    mapped = Nothing().map(lambda x: x * 2)
    assert mapped.is_none()
    assert mapped.get_or_else(0) == 0


def test_maybe_bind():
    def half(x):
        return Nothing() if x % 2 else Some(x // 2)

    assert Some(4).bind(half) == Some(2)
    assert Some(3).bind(half).is_none()
    assert Nothing().bind(half).is_none()


def test_either():
    right = Right(5)
    assert right.is_right() and not right.is_left()
    assert right.value == 5
    with pytest.raises(ValueError):
        right.get_error()

    left = Left({"error": "x"})
    assert left.is_left()
    assert left.get_error() == {"error": "x"}
    assert left != Right({"error": "x"})
