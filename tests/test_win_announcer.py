"""
Tests for the delayed level-complete announcement.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.puzzle import ManualScheduler, Operation, Puzzle, PuzzleSession
from src.win_announcer import WinAnnouncer


def make_game():
    """Level-5 style puzzle (6 ÷ 2 wins) wired to an announcer on a manual clock."""
    announcements = []
    scheduler = ManualScheduler()
    announcer = WinAnnouncer(scheduler, lambda: announcements.append("won"), delay=1.0)
    session = PuzzleSession(Puzzle.from_values(3, [6, 2, 4]), scheduler=scheduler,
                            on_change=announcer.update)
    return session, scheduler, announcer, announcements


def win(session):
    six = next(tile for tile in session.tiles if tile.value == 6)
    two = next(tile for tile in session.tiles if tile.value == 2)
    session.pick_tile(six)
    session.pick_operation(Operation.DIVIDE)
    session.pick_tile(two)
    assert session.won


def test_announces_after_delay():
    session, scheduler, announcer, announcements = make_game()
    win(session)

    assert announcer.pending
    scheduler.advance(0.5)
    assert announcements == []
    scheduler.advance(0.5)
    assert announcements == ["won"]
    assert announcer.announced


def test_undo_cancels_and_rewin_announces_once():
    session, scheduler, announcer, announcements = make_game()
    win(session)
    scheduler.advance(0.5)

    session.undo()
    assert not announcer.pending
    win(session)

    # The first win's deadline passes without an announcement
    scheduler.advance(0.75)
    assert announcements == []
    scheduler.advance(0.25)
    assert announcements == ["won"]
    scheduler.advance(5.0)
    assert announcements == ["won"]


def test_announces_at_most_once_per_session():
    session, scheduler, _, announcements = make_game()
    win(session)
    scheduler.advance(1.0)

    session.undo()
    win(session)
    scheduler.advance(1.0)
    assert announcements == ["won"]


def test_reset_cancels_pending_announcement():
    session, scheduler, announcer, announcements = make_game()
    win(session)
    announcer.reset()

    scheduler.advance(2.0)
    assert announcements == []
    assert not announcer.pending
    assert not announcer.announced
