from moodtracker.core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from moodtracker.models.mood import MoodEntry
from moodtracker.models.user import User
from moodtracker.services import moods, users


def test_create_user_hides_password_and_hashes_it(db):
    result = users.create_user(db, "ally", "a@b.com", "Password1")
    assert result.ok
    assert "password" not in result.data
    assert result.data["username"] == "ally"

    stored = db.query(User).filter(User.email == "a@b.com").one()
    assert stored.password != "Password1"
    assert stored.password.startswith("$2")


def test_create_user_short_username(db):
    result = users.create_user(db, "al", "a@b.com", "Password1")
    assert not result.ok
    assert isinstance(result.error, ValidationError)
    assert "at least" in result.error.message or "between 3" in result.error.message
    assert db.query(User).count() == 0


def test_duplicate_email_conflicts(db, make_user):
    make_user(email="dup@example.com")
    result = users.create_user(db, "another", "dup@example.com", "Password1")
    assert isinstance(result.error, ConflictError)


def test_admin_role_granted_from_settings(db, make_user):
    assert make_user(email="admin@example.com")["is_admin"] is True
    assert make_user()["is_admin"] is False


def test_verify_user(db, make_user):
    user = make_user(email="me@example.com", password="Password1")

    ok = users.verify_user(db, "me@example.com", "Password1")
    assert ok.ok and ok.data["user_id"] == user["user_id"]

    wrong = users.verify_user(db, "me@example.com", "Password2")
    assert isinstance(wrong.error, AuthError)

    missing = users.verify_user(db, "nobody@example.com", "Password1")
    assert isinstance(missing.error, NotFoundError)

    blank = users.verify_user(db, "me@example.com", "")
    assert isinstance(blank.error, ValidationError)


def test_update_user_partial_and_rehash(db, make_user):
    user = make_user(password="Password1")
    result = users.update_user(db, user["user_id"], {"password": "NewPassword2"})
    assert result.ok
    assert users.verify_user(db, user["email"], "NewPassword2").ok
    assert not users.verify_user(db, user["email"], "Password1").ok

    renamed = users.update_user(db, user["user_id"], {"username": "renamed"})
    assert renamed.data["username"] == "renamed"
    assert renamed.data["email"] == user["email"]


def test_update_user_rejects_bad_fields(db, make_user):
    user = make_user()
    assert isinstance(users.update_user(db, user["user_id"], {"email": "nope"}).error, ValidationError)
    assert isinstance(users.update_user(db, user["user_id"], {}).error, ValidationError)
    assert isinstance(users.update_user(db, 9999, {"username": "ghost"}).error, NotFoundError)


def test_update_user_email_taken(db, make_user):
    first = make_user()
    second = make_user()
    result = users.update_user(db, second["user_id"], {"email": first["email"]})
    assert isinstance(result.error, ConflictError)


def test_delete_user_cascades(db, make_user):
    user = make_user()
    assert moods.create_mood_entry(db, user["user_id"], {"mood": "calm", "mood_rating": 6}).ok

    assert users.delete_user(db, user["user_id"]).ok
    assert db.query(MoodEntry).count() == 0
    assert isinstance(users.delete_user(db, user["user_id"]).error, NotFoundError)


def test_concurrent_signup_with_same_email_conflicts(db, make_user, monkeypatch):
    make_user(email="race@example.com")
    # the other request committed between this one's lookup and its insert
    monkeypatch.setattr(users, "_find_by_email", lambda db, email: None)

    result = users.create_user(db, "late", "race@example.com", "Password1")
    assert isinstance(result.error, ConflictError)
    assert result.error.message == "User already exists with this email"
    assert result.status_code == 400
    assert db.query(User).count() == 1


def test_concurrent_email_change_conflicts(db, make_user, monkeypatch):
    first = make_user()
    second = make_user()
    monkeypatch.setattr(users, "_find_by_email", lambda db, email: None)

    result = users.update_user(db, second["user_id"], {"email": first["email"]})
    assert isinstance(result.error, ConflictError)
    assert users.get_user(db, second["user_id"]).data["email"] == second["email"]


def test_created_at_serialized_as_utc(db, make_user):
    user = make_user()
    assert user["created_at"].endswith("+00:00")
