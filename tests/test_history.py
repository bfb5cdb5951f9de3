from __future__ import annotations

import random
from pathlib import Path

import pytest

from pic_sorter.actions import Delete, MkDir, Move, Rename, Skip
from pic_sorter.history import ActionLog, HistoryError


IMAGES = [Path("a.png"), Path("b.png"), Path("c.png")]


def _step_sum(log: ActionLog) -> int:
    return sum(action.queue_step() for action in log.actions if action.queue_step())


def test_action_kinds_report_step_and_poppability() -> None:
    assert Skip(Path("a")).queue_step() == 1
    assert Move(Path("a"), Path("d")).queue_step() == 1
    assert Delete(Path("a")).queue_step() == 1
    assert Rename("x.png").queue_step() == 0
    assert MkDir(Path("d")).queue_step() == 0

    assert Rename("x.png").is_poppable()
    assert not MkDir(Path("d")).is_poppable()


def test_push_advances_cursor_by_step() -> None:
    log = ActionLog(IMAGES)
    assert log.current_image() == Path("a.png")

    log.push(Rename("new.png"))
    assert log.cursor == 0
    log.push(Move(Path("a.png"), Path("dest")))
    assert log.cursor == 1
    assert log.current_image() == Path("b.png")


def test_push_when_complete_is_noop() -> None:
    log = ActionLog([Path("a.png")])
    assert log.push(Skip(Path("a.png")))
    assert log.is_complete()
    assert log.current_image() is None

    before = log.actions
    assert not log.push(Delete(Path("a.png")))
    assert log.actions == before
    assert log.cursor == 1


def test_pop_on_empty_log_is_noop() -> None:
    log = ActionLog(IMAGES)
    assert log.pop() is None
    assert log.actions == ()
    assert log.cursor == 0


def test_pop_rewinds_cursor() -> None:
    log = ActionLog(IMAGES)
    log.push(Skip(Path("a.png")))
    log.push(Delete(Path("b.png")))

    assert log.pop() == Delete(Path("b.png"))
    assert log.cursor == 1
    assert log.current_image() == Path("b.png")


def test_mkdir_is_never_popped() -> None:
    seed = [MkDir(Path("d1")), MkDir(Path("d2"))]
    log = ActionLog(IMAGES, seed)
    log.push(Move(Path("a.png"), Path("d1")))

    for _ in range(5):
        log.pop()

    assert log.actions == tuple(seed)
    assert log.cursor == 0


def test_seed_rejects_decisions() -> None:
    with pytest.raises(HistoryError):
        ActionLog(IMAGES, [Skip(Path("a.png"))])


def test_seed_is_kept_without_images() -> None:
    log = ActionLog([], [MkDir(Path("d1"))])
    assert log.is_complete()
    assert log.actions == (MkDir(Path("d1")),)


def test_cursor_matches_log_for_random_sequences() -> None:
    rng = random.Random(1234)
    images = [Path(f"{i}.png") for i in range(8)]
    log = ActionLog(images, [MkDir(Path("dest"))])

    for _ in range(500):
        if rng.random() < 0.6:
            current = log.current_image() or Path("done.png")
            action = rng.choice([
                Skip(current),
                Move(current, Path("dest")),
                Delete(current),
                Rename("renamed.png"),
            ])
            log.push(action)
        else:
            log.pop()

        assert log.cursor == _step_sum(log)
        assert 0 <= log.cursor <= len(images)
        assert log.actions[0] == MkDir(Path("dest"))


def test_decision_group_consumes_one_slot() -> None:
    log = ActionLog(IMAGES)
    log.push_decision([Rename("cat.png"), Move(Path("a.png"), Path("cats"))])

    assert log.cursor == 1
    assert len(log) == 2

    removed = log.undo_decision()
    assert removed == [Rename("cat.png"), Move(Path("a.png"), Path("cats"))]
    assert log.cursor == 0
    assert log.actions == ()


@pytest.mark.parametrize(
    "group",
    [
        [],
        [Rename("x.png")],
        [Skip(Path("a.png")), Rename("x.png")],
        [Skip(Path("a.png")), Skip(Path("b.png"))],
        [MkDir(Path("d")), Skip(Path("a.png"))],
    ],
)
def test_malformed_decision_groups_are_rejected(group) -> None:
    log = ActionLog(IMAGES)
    with pytest.raises(HistoryError):
        log.push_decision(group)
    assert log.actions == ()


def test_undo_decision_keeps_seeded_mkdir() -> None:
    log = ActionLog(IMAGES, [MkDir(Path("d1"))])
    log.push_decision([Skip(Path("a.png"))])

    assert log.undo_decision() == [Skip(Path("a.png"))]
    assert log.undo_decision() == []
    assert log.actions == (MkDir(Path("d1")),)


def test_primitive_pop_inside_group() -> None:
    log = ActionLog(IMAGES)
    log.push_decision([Rename("x.png"), Skip(Path("a.png"))])

    assert log.pop() == Skip(Path("a.png"))
    assert log.cursor == 0
    # Rename left alone is now the whole tail group
    assert log.undo_decision() == [Rename("x.png")]
    assert log.actions == ()
