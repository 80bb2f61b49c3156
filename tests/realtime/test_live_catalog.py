from __future__ import annotations

from src.school_management.school_management.core.enums import ChangeAction
from src.school_management.school_management.realtime.catalog import ScheduleCatalog
from src.school_management.school_management.realtime.feed import ChangeEvent
from src.school_management.school_management.realtime.live_table import LiveTable
from src.school_management.school_management.rooms.service import RoomService


def test_feed_delivers_to_table_subscribers_until_closed(feed):
    seen = []
    sub = feed.subscribe("rooms", seen.append)

    feed.notify("rooms", ChangeAction.INSERT, 7)
    feed.notify("periods", ChangeAction.INSERT, 1)
    sub.close()
    feed.notify("rooms", ChangeAction.DELETE, 7)

    assert seen == [ChangeEvent("rooms", ChangeAction.INSERT, 7)]
    assert feed.subscriber_count("rooms") == 0


def test_failing_handler_does_not_block_others(feed):
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    feed.subscribe("rooms", broken)
    feed.subscribe("rooms", seen.append)
    feed.notify("rooms", ChangeAction.UPDATE)

    assert len(seen) == 1


def test_live_table_reloads_on_change(feed):
    rows = ["a"]

    with LiveTable(feed, "rooms", lambda: list(rows)) as table:
        assert table.rows == ["a"]
        rows.append("b")
        feed.notify("rooms", ChangeAction.INSERT)
        assert table.rows == ["a", "b"]

    assert not table.is_open
    rows.append("c")
    feed.notify("rooms", ChangeAction.INSERT)
    assert table.rows == ["a", "b"]


def test_catalog_tracks_room_writes(feed, repos):
    catalog = ScheduleCatalog(feed, repos.rooms, repos.periods)

    with catalog:
        assert catalog.is_open
        assert [r.name for r in catalog.rooms] == ["Lab A", "Room 101"]
        assert [p.period_number for p in catalog.periods] == [1, 2]

        RoomService(repos.rooms).import_csv("name,capacity\nAuditorium,200\n")
        assert [r.name for r in catalog.rooms] == ["Auditorium", "Lab A", "Room 101"]

    assert not catalog.is_open
    assert feed.subscriber_count("rooms") == 0
    assert feed.subscriber_count("periods") == 0
