import pytest

from navigation.zoom_stack import ZoomStack, ZoomStackError
from utils.coords import ComplexRect

A = ComplexRect(complex(-2.0, -1.5), complex(1.0, 1.5))
B = ComplexRect(complex(-1.0, -0.5), complex(0.0, 0.5))
C = ComplexRect(complex(-0.75, -0.1), complex(-0.7, -0.05))


def test_new_stack_is_empty():
    stack = ZoomStack()
    assert stack.is_empty()
    assert stack.level == 0


def test_pop_on_empty_is_rejected():
    stack = ZoomStack()
    with pytest.raises(ZoomStackError):
        stack.pop()
    assert stack.is_empty()


def test_top_on_empty_is_rejected():
    with pytest.raises(ZoomStackError):
        ZoomStack().top


def test_push_then_pop_restores_previous_top():
    stack = ZoomStack()
    stack.push(A)
    stack.push(B)
    assert stack.pop() == B
    assert stack.top == A
    assert stack.level == 1


def test_pop_last_level_empties_stack():
    stack = ZoomStack()
    stack.push(A)
    stack.pop()
    assert stack.is_empty()


def test_jump_to_level_one_pops_all_but_bottom():
    stack = ZoomStack()
    for rect in (A, B, C):
        stack.push(rect)
    pops = stack.jump_to_level(1)
    assert pops == 2
    assert stack.top == A
    assert stack.level == 1


@pytest.mark.parametrize("level", [3, 4, 10])
def test_jump_to_level_at_or_above_top_is_noop(level):
    stack = ZoomStack()
    for rect in (A, B, C):
        stack.push(rect)
    assert stack.jump_to_level(level) == 0
    assert stack.top == C


def test_jump_to_level_on_empty_stack_is_noop():
    stack = ZoomStack()
    assert stack.jump_to_level(1) == 0
    assert stack.is_empty()


def test_modify_top_replaces_without_growing():
    stack = ZoomStack()
    stack.push(A)
    stack.push(B)
    stack.modify_top(C)
    assert stack.level == 2
    assert stack.top == C
    assert stack.rect_at(1) == A


def test_rect_at_is_one_based():
    stack = ZoomStack()
    stack.push(A)
    stack.push(B)
    assert stack.rect_at(1) == A
    assert stack.rect_at(2) == B
    with pytest.raises(ZoomStackError):
        stack.rect_at(0)
    with pytest.raises(ZoomStackError):
        stack.rect_at(3)


def test_clear_empties_stack():
    stack = ZoomStack()
    stack.push(A)
    stack.push(B)
    stack.clear()
    assert stack.is_empty()


def test_clone_is_independent():
    stack = ZoomStack()
    stack.push(A)
    copy = stack.clone()
    copy.push(B)
    assert stack.level == 1
    assert copy.level == 2


def test_save_load_round_trips_full_precision(tmp_path):
    fine = ComplexRect(complex(-0.7436438870371587, 0.13182590420531197),
                       complex(-0.7436438870371586 + 1e-16, 0.1318259042053120 + 3e-17))
    stack = ZoomStack()
    for rect in (A, B, fine):
        stack.push(rect)
    path = tmp_path / "zoom.csv"
    stack.save(path)

    loaded = ZoomStack.load(path)
    assert loaded == stack
    assert loaded.top.as_tuple() == fine.as_tuple()
    assert list(loaded) == [A, B, fine]


def test_save_writes_bottom_level_first(tmp_path):
    stack = ZoomStack()
    stack.push(A)
    stack.push(B)
    path = tmp_path / "zoom.csv"
    stack.save(path)
    lines = path.read_text().splitlines()
    assert lines[0] == "-2.0,-1.5,1.0,1.5"
    assert len(lines) == 2


def test_load_rejects_malformed_lines(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("1.0,2.0,3.0\n")
    with pytest.raises(ValueError):
        ZoomStack.load(path)
