import pytest

from reviewstack.components.review_window import ReviewWindow, WindowEntry
from reviewstack.errors import InvalidConfiguration


def entry(i):
    return WindowEntry(index=i, item=f"item{i}", content=f"card{i}")


def test_capacity_must_be_positive():
    with pytest.raises(InvalidConfiguration):
        ReviewWindow(0)


def test_push_back_refuses_when_full():
    w = ReviewWindow(2)
    w.push_back(entry(0))
    w.push_back(entry(1))
    assert w.full
    with pytest.raises(OverflowError):
        w.push_back(entry(2))


def test_pop_front_on_empty_raises():
    with pytest.raises(IndexError):
        ReviewWindow(1).pop_front()


def test_push_front_evicts_tail_when_over_capacity():
    w = ReviewWindow(3)
    for i in (1, 2, 3):
        w.push_back(entry(i))
    evicted = w.push_front(entry(0))
    assert evicted == entry(3)
    assert [e.index for e in w] == [0, 1, 2]


def test_push_front_with_room_evicts_nothing():
    w = ReviewWindow(3)
    w.push_back(entry(5))
    assert w.push_front(entry(4)) is None
    assert w.front == entry(4)


def test_position_of_and_replace():
    w = ReviewWindow(3)
    for i in (4, 5, 6):
        w.push_back(entry(i))
    assert w.position_of(5) == 1
    assert w.position_of(7) is None
    assert w.position_of(3) is None
    updated = w.replace(1, item="new", content="fresh")
    assert updated == WindowEntry(index=5, item="new", content="fresh")
    assert w.entries()[1] is updated


def test_satisfies_checks_length_and_contiguity():
    w = ReviewWindow(3)
    for i in (2, 3, 4):
        w.push_back(entry(i))
    assert w.satisfies(cursor=2, count=10)
    assert not w.satisfies(cursor=1, count=10)
    assert not w.satisfies(cursor=2, count=4)  # should hold only two entries
    w.clear()
    assert w.satisfies(cursor=10, count=10)
