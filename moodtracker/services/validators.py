# moodtracker/services/validators.py
"""Input rules shared by the services.

Each check raises ``ValidationError`` naming the first rule the input breaks,
in the order the rules are listed here.
"""
import re
from typing import Any, Dict, Mapping, Optional

from moodtracker.core.errors import ValidationError
from moodtracker.core.timezone import parse_time_bound
from moodtracker.models.factor import FACTOR_CATEGORIES, FACTOR_ICON_MAX_LENGTH, FACTOR_NAME_MAX_LENGTH
from moodtracker.models.mood import LOCATION_MAX_LENGTH, MAX_FACTORS_PER_ENTRY, MOOD_MAX_LENGTH
from moodtracker.models.user import EMAIL_MAX_LENGTH, USERNAME_MAX_LENGTH
from moodtracker.schemas.factor import FactorPatch
from moodtracker.schemas.mood import FactorAttachmentIn, MoodEntryIn, MoodEntryPatch, MoodHistoryFilters
from moodtracker.schemas.user import UserPatch

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

USERNAME_MIN, USERNAME_MAX = 3, USERNAME_MAX_LENGTH
PASSWORD_MIN = 8
RATING_MIN, RATING_MAX = 1, 10
MAX_PAGE_SIZE = 100

MOOD_PATCH_FIELDS = ("mood", "mood_rating", "notes", "location")


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def require_mapping(data: Any, what: str = "Request body") -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValidationError(f"{what} must be a JSON object")
    return data


def require_id(value: Any, label: str) -> int:
    if not is_int(value) or value < 1:
        raise ValidationError(f"Invalid {label} ID")
    return value


# ---------------------------------------------------------------- users

def is_valid_email(email: Any) -> bool:
    return isinstance(email, str) and len(email) <= EMAIL_MAX_LENGTH and EMAIL_RE.match(email) is not None


def username_problem(username: Any) -> Optional[str]:
    if not isinstance(username, str) or not (USERNAME_MIN <= len(username) <= USERNAME_MAX):
        return f"Username must be between {USERNAME_MIN} and {USERNAME_MAX} characters"
    return None


def password_problem(password: Any) -> Optional[str]:
    if not isinstance(password, str):
        return "Password must be a string"
    if len(password) < PASSWORD_MIN:
        return f"Password must be at least {PASSWORD_MIN} characters"
    if not re.search(r"[a-z]", password):
        return "Password must include a lowercase letter"
    if not re.search(r"[A-Z]", password):
        return "Password must include an uppercase letter"
    if not re.search(r"\d", password):
        return "Password must include a number"
    return None


def validate_new_user(username: Any, email: Any, password: Any) -> None:
    problem = username_problem(username)
    if problem:
        raise ValidationError(problem)
    if not is_valid_email(email):
        raise ValidationError("Invalid email format")
    problem = password_problem(password)
    if problem:
        raise ValidationError(problem)


def validate_user_patch(data: Any) -> UserPatch:
    data = require_mapping(data)
    if "username" in data:
        problem = username_problem(data["username"])
        if problem:
            raise ValidationError(problem)
    if "email" in data and not is_valid_email(data["email"]):
        raise ValidationError("Invalid email format")
    if "password" in data:
        problem = password_problem(data["password"])
        if problem:
            raise ValidationError(problem)

    patch = UserPatch(**{k: data[k] for k in UserPatch.model_fields if k in data})
    if not patch.model_fields_set:
        raise ValidationError("No valid fields to update")
    return patch


# ---------------------------------------------------------------- factors

def validate_factor(data: Any, partial: bool = False) -> FactorPatch:
    data = require_mapping(data)

    if not partial or "name" in data:
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Factor name is required and must be a non-empty string")
        if len(name.strip()) > FACTOR_NAME_MAX_LENGTH:
            raise ValidationError(f"Factor name must be at most {FACTOR_NAME_MAX_LENGTH} characters")

    if not partial or "category" in data:
        category = data.get("category")
        if not isinstance(category, str) or category.strip() not in FACTOR_CATEGORIES:
            raise ValidationError(f"Category must be one of: {', '.join(FACTOR_CATEGORIES)}")

    icon = data.get("icon")
    if icon is not None and not isinstance(icon, str):
        raise ValidationError("Icon must be a string")
    if icon is not None and len(icon.strip()) > FACTOR_ICON_MAX_LENGTH:
        raise ValidationError(f"Icon must be at most {FACTOR_ICON_MAX_LENGTH} characters")

    fields: Dict[str, Any] = {}
    if "name" in data:
        fields["name"] = data["name"].strip()
    if "category" in data:
        fields["category"] = data["category"].strip()
    if "icon" in data:
        fields["icon"] = icon.strip() if icon else None

    patch = FactorPatch(**fields)
    if partial and not patch.model_fields_set:
        raise ValidationError("No valid fields to update")
    return patch


# ---------------------------------------------------------------- mood entries

def _check_mood(mood: Any) -> str:
    if not isinstance(mood, str) or not mood.strip():
        raise ValidationError("Mood is required and must be a non-empty string")
    if len(mood.strip()) > MOOD_MAX_LENGTH:
        raise ValidationError(f"Mood must be at most {MOOD_MAX_LENGTH} characters")
    return mood.strip()


def _check_rating(rating: Any) -> int:
    if not is_int(rating) or not (RATING_MIN <= rating <= RATING_MAX):
        raise ValidationError(f"Mood rating must be an integer between {RATING_MIN} and {RATING_MAX}")
    return rating


def _check_optional_text(value: Any, label: str, max_length: Optional[int] = None) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{label} must be a string")
    if value is not None and max_length is not None and len(value) > max_length:
        raise ValidationError(f"{label} must be at most {max_length} characters")
    return value


def _check_factors(factors: Any):
    if factors is None:
        return []
    if not isinstance(factors, list):
        raise ValidationError("Factors must be an array")
    if len(factors) > MAX_FACTORS_PER_ENTRY:
        raise ValidationError(f"You can only select up to {MAX_FACTORS_PER_ENTRY} factors")

    out = []
    seen = set()
    for f in factors:
        if (
            not isinstance(f, Mapping)
            or not is_int(f.get("factor_id"))
            or not is_int(f.get("intensity"))
            or not (RATING_MIN <= f["intensity"] <= RATING_MAX)
        ):
            raise ValidationError(
                f"Each factor must have a valid factor_id and intensity between {RATING_MIN} and {RATING_MAX}"
            )
        if f["factor_id"] in seen:
            raise ValidationError("Each factor can only be selected once per entry")
        seen.add(f["factor_id"])
        out.append(FactorAttachmentIn(factor_id=f["factor_id"], intensity=f["intensity"]))
    return out


def validate_mood_entry(data: Any) -> MoodEntryIn:
    data = require_mapping(data)
    mood = _check_mood(data.get("mood"))
    rating = _check_rating(data.get("mood_rating"))
    notes = _check_optional_text(data.get("notes"), "Notes")
    location = _check_optional_text(data.get("location"), "Location", LOCATION_MAX_LENGTH)
    factors = _check_factors(data.get("factors"))
    return MoodEntryIn(mood=mood, mood_rating=rating, notes=notes, location=location, factors=factors)


def validate_mood_patch(data: Any) -> MoodEntryPatch:
    data = require_mapping(data)
    fields: Dict[str, Any] = {}
    for key in MOOD_PATCH_FIELDS:
        if key not in data:
            continue
        value = data[key]
        if key == "mood":
            fields[key] = _check_mood(value)
        elif key == "mood_rating":
            fields[key] = _check_rating(value)
        else:
            max_length = LOCATION_MAX_LENGTH if key == "location" else None
            fields[key] = _check_optional_text(value, key.capitalize(), max_length)

    if not fields:
        raise ValidationError("No valid fields to update")
    return MoodEntryPatch(**fields)


def _int_param(value: Any, name: str, default: int, lo: int, hi: Optional[int] = None) -> int:
    if value is None or value == "":
        return default
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise ValidationError(f"'{name}' must be an integer")
    if not is_int(value) or value < lo or (hi is not None and value > hi):
        bound = f"between {lo} and {hi}" if hi is not None else f"at least {lo}"
        raise ValidationError(f"'{name}' must be an integer {bound}")
    return value


def validate_history_filters(filters: Optional[Mapping[str, Any]]) -> MoodHistoryFilters:
    filters = filters or {}
    start = parse_time_bound(filters.get("from"), "from")
    end = parse_time_bound(filters.get("to"), "to", end_of_day=True)
    if start and end and start > end:
        raise ValidationError("'from' must not be later than 'to'")

    rating = filters.get("rating")
    if rating not in (None, ""):
        rating = _int_param(rating, "rating", 0, RATING_MIN, RATING_MAX)
    else:
        rating = None

    mood = filters.get("mood")
    if mood is not None and not isinstance(mood, str):
        raise ValidationError("'mood' must be a string")
    mood = mood.strip() if mood and mood.strip() else None

    return MoodHistoryFilters(
        from_=start,
        to=end,
        rating=rating,
        mood=mood,
        page=_int_param(filters.get("page"), "page", 1, 1),
        limit=_int_param(filters.get("limit"), "limit", 10, 1, MAX_PAGE_SIZE),
    )


# ---------------------------------------------------------------- journal

def validate_journal_content(content: Any) -> str:
    if not isinstance(content, str) or not content.strip():
        raise ValidationError("Journal content is required and must be a non-empty string")
    return content
