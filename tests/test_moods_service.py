from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import event

from moodtracker.core.errors import NotFoundError, StorageError, ValidationError
from moodtracker.models.journal import JournalEntry
from moodtracker.models.mood import MoodEntry, MoodFactor
from moodtracker.services import journals, moods


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def other(make_user):
    return make_user()


def _create(db, user_id, **data):
    body = {"mood": "happy", "mood_rating": 7}
    body.update(data)
    result = moods.create_mood_entry(db, user_id, body)
    assert result.ok, result.error
    return result.data


def _set_timestamp(db, entry_id, when):
    db.query(MoodEntry).filter(MoodEntry.entry_id == entry_id).update({"timestamp": when})
    db.commit()


def test_create_with_factor(db, user):
    result = moods.create_mood_entry(
        db, user["user_id"], {"mood": "happy", "mood_rating": 8, "factors": [{"factor_id": 3, "intensity": 6}]}
    )
    assert result.ok
    assert result.message == "Mood entry created successfully"
    assert result.data["user_id"] == user["user_id"]
    assert "factors" not in result.data

    links = db.query(MoodFactor).filter(MoodFactor.entry_id == result.data["entry_id"]).all()
    assert [(l.factor_id, l.intensity) for l in links] == [(3, 6)]


@pytest.mark.parametrize("rating", [0, 11, 7.5, "7"])
def test_invalid_rating_persists_nothing(db, user, rating):
    result = moods.create_mood_entry(db, user["user_id"], {"mood": "sad", "mood_rating": rating})
    assert isinstance(result.error, ValidationError)
    assert db.query(MoodEntry).count() == 0


def test_more_than_three_factors(db, user):
    factors = [{"factor_id": i, "intensity": 3} for i in (1, 2, 3, 4)]
    result = moods.create_mood_entry(db, user["user_id"], {"mood": "meh", "mood_rating": 5, "factors": factors})
    assert isinstance(result.error, ValidationError)
    assert db.query(MoodEntry).count() == 0


def test_unknown_factor_rolls_back_everything(db, user):
    factors = [{"factor_id": 1, "intensity": 3}, {"factor_id": 999, "intensity": 3}]
    result = moods.create_mood_entry(db, user["user_id"], {"mood": "meh", "mood_rating": 5, "factors": factors})
    assert isinstance(result.error, ValidationError)
    assert db.query(MoodEntry).count() == 0
    assert db.query(MoodFactor).count() == 0


def test_failed_attachment_insert_rolls_back_entry(db, user):
    flushed = []

    def break_intensity(mapper, connection, target):
        # the entry row is already flushed; this attachment breaks the check constraint
        flushed.append(target.entry_id)
        target.intensity = 99

    event.listen(MoodFactor, "before_insert", break_intensity)
    try:
        result = moods.create_mood_entry(
            db, user["user_id"], {"mood": "happy", "mood_rating": 8, "factors": [{"factor_id": 3, "intensity": 6}]}
        )
    finally:
        event.remove(MoodFactor, "before_insert", break_intensity)

    assert flushed and flushed[0] is not None
    assert isinstance(result.error, StorageError)
    assert result.status_code == 500
    assert db.query(MoodEntry).count() == 0
    assert db.query(MoodFactor).count() == 0

    # the session is usable again after the rollback
    assert moods.create_mood_entry(db, user["user_id"], {"mood": "calm", "mood_rating": 6}).ok


def test_round_trip_through_history(db, user):
    created = _create(db, user["user_id"], mood="content", mood_rating=6, notes="walk", location="park")
    page = moods.get_mood_entries_by_user_id(db, user["user_id"], {})
    assert page.ok
    [fetched] = page.data
    for key in ("entry_id", "mood", "mood_rating", "notes", "location"):
        assert fetched[key] == created[key]


def test_get_single_entry_includes_factors(db, user, other):
    created = _create(db, user["user_id"], factors=[{"factor_id": 2, "intensity": 9}])
    detail = moods.get_mood_entry(db, user["user_id"], created["entry_id"])
    assert detail.data["factors"][0]["factor_id"] == 2
    assert isinstance(moods.get_mood_entry(db, other["user_id"], created["entry_id"]).error, NotFoundError)


def test_pagination(db, user):
    for i in range(15):
        _create(db, user["user_id"], mood_rating=(i % 10) + 1)

    page = moods.get_mood_entries_by_user_id(db, user["user_id"], {"limit": "10", "page": "2"})
    assert len(page.data) == 5
    assert page.pagination == {"totalItems": 15, "totalPages": 2, "currentPage": 2, "pageSize": 10}


def test_history_is_newest_first_and_user_scoped(db, user, other):
    base = datetime(2025, 8, 1, 12, tzinfo=timezone.utc)
    ids = []
    for i in range(3):
        entry = _create(db, user["user_id"])
        _set_timestamp(db, entry["entry_id"], base + timedelta(days=i))
        ids.append(entry["entry_id"])
    _create(db, other["user_id"])

    page = moods.get_mood_entries_by_user_id(db, user["user_id"], {})
    assert [e["entry_id"] for e in page.data] == list(reversed(ids))


def test_filters_apply_to_count(db, user):
    base = datetime(2025, 8, 1, 9, tzinfo=timezone.utc)
    for i, (mood, rating) in enumerate([("Happy", 8), ("happy", 3), ("stressed", 8), ("happy", 8)]):
        entry = _create(db, user["user_id"], mood=mood, mood_rating=rating)
        _set_timestamp(db, entry["entry_id"], base + timedelta(days=i))

    by_mood = moods.get_mood_entries_by_user_id(db, user["user_id"], {"mood": "HAPPY"})
    assert len(by_mood.data) == 3
    assert by_mood.pagination["totalItems"] == 3

    combined = moods.get_mood_entries_by_user_id(db, user["user_id"], {"mood": "happy", "rating": "8"})
    assert combined.pagination["totalItems"] == 2

    window = moods.get_mood_entries_by_user_id(db, user["user_id"], {"from": "2025-08-02", "to": "2025-08-03"})
    assert sorted(e["mood"] for e in window.data) == ["happy", "stressed"]
    assert window.pagination == {"totalItems": 2, "totalPages": 1, "currentPage": 1, "pageSize": 10}


def test_update_only_supplied_fields(db, user):
    created = _create(db, user["user_id"], notes="before", location="home")
    result = moods.update_mood_entry(db, user["user_id"], created["entry_id"], {"mood_rating": 2})
    assert result.ok
    assert result.data["mood_rating"] == 2
    assert result.data["notes"] == "before"
    assert result.data["location"] == "home"


def test_update_validation(db, user):
    created = _create(db, user["user_id"])
    assert isinstance(moods.update_mood_entry(db, user["user_id"], created["entry_id"], {}).error, ValidationError)
    bad = moods.update_mood_entry(db, user["user_id"], created["entry_id"], {"mood_rating": 12})
    assert isinstance(bad.error, ValidationError)


def test_other_user_cannot_update_or_delete(db, user, other):
    created = _create(db, user["user_id"], mood="mine")

    upd = moods.update_mood_entry(db, other["user_id"], created["entry_id"], {"mood": "theirs"})
    assert isinstance(upd.error, NotFoundError)
    dele = moods.delete_mood_entry(db, other["user_id"], created["entry_id"])
    assert isinstance(dele.error, NotFoundError)
    jour = journals.create_journal_entry(db, other["user_id"], created["entry_id"], "sneaky")
    assert isinstance(jour.error, NotFoundError)

    db.expire_all()
    entry = db.query(MoodEntry).filter(MoodEntry.entry_id == created["entry_id"]).one()
    assert entry.mood == "mine"


def test_delete_is_idempotent_and_cascades(db, user):
    created = _create(db, user["user_id"], factors=[{"factor_id": 1, "intensity": 4}])
    assert journals.create_journal_entry(db, user["user_id"], created["entry_id"], "note").ok

    first = moods.delete_mood_entry(db, user["user_id"], created["entry_id"])
    assert first.ok
    assert db.query(MoodFactor).count() == 0
    assert db.query(JournalEntry).count() == 0

    again = moods.delete_mood_entry(db, user["user_id"], created["entry_id"])
    assert isinstance(again.error, NotFoundError)


def test_timestamps_serialized_as_utc(db, user):
    created = _create(db, user["user_id"])
    assert created["timestamp"].endswith("+00:00")

    detail = moods.get_mood_entry(db, user["user_id"], created["entry_id"]).data
    assert detail["timestamp"] == created["timestamp"]
