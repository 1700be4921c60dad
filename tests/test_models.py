"""
Tests for core data models, the filter hook and validation helpers.
"""

import pytest

from reqres_users.core.events import EventDispatcher, FilterUsersEvent
from reqres_users.core.exceptions import ValidationError
from reqres_users.core.models import DisplaySettings, FetchResult, UserRecord
from reqres_users.core.validation import (
    clamp_int,
    clean_css_identifier,
    strip_tags,
    validate_api_key,
    validate_response_size,
)


class TestUserRecord:
    """Tests for UserRecord dataclass."""

    def test_from_api_data(self):
        """Known fields are mapped, extra fields ignored."""
        user = UserRecord.from_api_data({
            "id": 7,
            "email": "michael.lawson@reqres.in",
            "first_name": "Michael",
            "last_name": "Lawson",
            "avatar": "https://reqres.in/img/faces/7-image.jpg",
        })
        assert user == UserRecord(7, "michael.lawson@reqres.in", "Michael", "Lawson")

    def test_coerces_types(self):
        """Numeric string ids become ints, other values strings."""
        user = UserRecord.from_api_data({"id": "12", "email": 5, "first_name": "A", "last_name": "B"})
        assert user.id == 12
        assert user.email == "5"

    def test_missing_fields_coerce_to_empty(self):
        """Missing fields become zero or empty strings."""
        user = UserRecord.from_api_data({})
        assert user == UserRecord(0, "", "", "")

    def test_null_fields_coerce_to_empty(self):
        """JSON nulls become zero or empty strings, never "None"."""
        user = UserRecord.from_api_data(
            {"id": None, "email": None, "first_name": None, "last_name": None}
        )
        assert user == UserRecord(0, "", "", "")

    def test_overflowing_id(self):
        """An infinite id coerces to zero."""
        assert UserRecord.from_api_data({"id": float("inf")}).id == 0

    def test_non_numeric_id(self):
        """A non-numeric id coerces to zero."""
        assert UserRecord.from_api_data({"id": "abc"}).id == 0

    def test_immutable(self, sample_user):
        """Records are frozen."""
        with pytest.raises(AttributeError):
            sample_user.email = "other@reqres.in"

    def test_full_name_and_str(self, sample_user):
        assert sample_user.full_name == "George Bluth"
        assert str(sample_user) == "George Bluth <george.bluth@reqres.in>"

    def test_dict_round_trip(self, sample_user):
        assert UserRecord.from_dict(sample_user.to_dict()) == sample_user


class TestFetchResult:
    """Tests for FetchResult dataclass."""

    def test_empty(self):
        """The zero-result has no users and zero totals."""
        result = FetchResult.empty()
        assert result.users == ()
        assert result.total == 0
        assert result.total_pages == 0
        assert result.is_empty

    def test_len(self, sample_result):
        assert len(sample_result) == 2
        assert not sample_result.is_empty

    def test_dict_round_trip(self, sample_result):
        """Cache serialization keeps order and totals."""
        data = sample_result.to_dict()
        assert data["total"] == 12
        assert data["total_pages"] == 6
        assert [u["id"] for u in data["users"]] == [1, 2]
        assert FetchResult.from_dict(data) == sample_result


class TestDisplaySettings:
    """Tests for DisplaySettings."""

    def test_defaults(self):
        settings = DisplaySettings()
        assert settings.items_per_page == 6
        assert settings.cache_ttl == 300
        assert settings.labels == ("Email", "Forename", "Surname")

    def test_wrapper_id(self, sample_settings):
        """The wrapper id derives from the instance id."""
        assert sample_settings.wrapper_id == "reqres-users-block-0123456789abcdef"
        assert DisplaySettings().wrapper_id == "reqres-users-block-unsaved"

    def test_base_params(self, sample_settings):
        params = sample_settings.base_params()
        assert params["wrapper_id"] == sample_settings.wrapper_id
        assert params["per_page"] == 2
        assert params["cache_ttl"] == 300
        assert params["email_label"] == "Email"

    @pytest.mark.parametrize(
        "kwargs, field",
        [
            ({"items_per_page": 0}, "items_per_page"),
            ({"cache_ttl": -1}, "cache_ttl"),
            ({"email_label": "  "}, "email_label"),
            ({"surname_label": ""}, "surname_label"),
        ],
    )
    def test_validate_rejects(self, kwargs, field):
        with pytest.raises(ValidationError) as exc_info:
            DisplaySettings(**kwargs).validate()
        assert exc_info.value.field == field

    def test_validate_accepts_zero_ttl(self):
        assert DisplaySettings(cache_ttl=0).validate().cache_ttl == 0

    def test_dict_round_trip(self, sample_settings):
        assert DisplaySettings.from_dict(sample_settings.to_dict()) == sample_settings

    def test_from_partial_dict(self):
        settings = DisplaySettings.from_dict({"items_per_page": "3"})
        assert settings.items_per_page == 3
        assert settings.email_label == "Email"


class TestEventDispatcher:
    """Tests for the filter hook."""

    def test_passthrough_without_listeners(self, sample_result):
        event = EventDispatcher().dispatch(FilterUsersEvent(sample_result.users, 1, 2))
        assert event.users == list(sample_result.users)

    def test_listeners_run_in_order(self, sample_result):
        dispatcher = EventDispatcher()
        dispatcher.add_listener(lambda e: e.set_users(e.users[:1]))
        dispatcher.add_listener(lambda e: e.set_users(e.users * 2))

        event = dispatcher.dispatch(FilterUsersEvent(sample_result.users, 1, 2))

        assert [u.id for u in event.users] == [1, 1]

    def test_remove_listener(self):
        dispatcher = EventDispatcher()

        def listener(event):
            event.set_users([])

        dispatcher.add_listener(listener)
        dispatcher.remove_listener(listener)
        assert dispatcher.listeners == []

    def test_users_property_returns_copy(self, sample_result):
        event = FilterUsersEvent(sample_result.users, 1, 2)
        event.users.clear()
        assert len(event.users) == 2


class TestValidation:
    """Tests for input sanitizing helpers."""

    @pytest.mark.parametrize(
        "value, default, minimum, expected",
        [
            ("3", 0, 0, 3),
            ("-4", 0, 0, 0),
            (None, 6, 1, 6),
            ("abc", 300, 0, 300),
            ("0", 6, 1, 1),
        ],
    )
    def test_clamp_int(self, value, default, minimum, expected):
        assert clamp_int(value, default, minimum) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("reqres-users-block-abc123", "reqres-users-block-abc123"),
            ("block id_1", "block-id-1"),
            ('x"><script>', "xscript"),
            ("1abc", "_1abc"),
        ],
    )
    def test_clean_css_identifier(self, raw, expected):
        assert clean_css_identifier(raw) == expected

    def test_strip_tags(self):
        assert strip_tags("<b>Email</b>") == "Email"
        assert strip_tags("Mail <script>alert(1)</script>") == "Mail alert(1)"

    def test_validate_api_key(self):
        assert validate_api_key("  reqres-free-v1 ") == "reqres-free-v1"
        with pytest.raises(ValidationError):
            validate_api_key("   ")
        with pytest.raises(ValidationError):
            validate_api_key("x" * 256)

    def test_validate_response_size(self):
        validate_response_size(None)
        validate_response_size(1024)
        with pytest.raises(ValidationError):
            validate_response_size(11 * 1024 * 1024)
