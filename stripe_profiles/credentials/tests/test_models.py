"""Tests for the profile model and key classification."""

from datetime import date

import pytest
from pydantic import SecretStr

from stripe_profiles.credentials import ColorPreference, Mode, Profile, key_mode


class TestKeyMode:
    """Tests for key_mode classification."""

    @pytest.mark.parametrize(
        "api_key",
        ["sk_live_0000000001", "rk_live_abcdef123456"],
    )
    def test_live_keys(self, api_key):
        """Keys with a live segment are LIVE."""
        assert key_mode(api_key) is Mode.LIVE

    @pytest.mark.parametrize(
        "api_key",
        ["sk_test_1234abcd", "rk_test_abc", "opaque-token", "live_key", ""],
    )
    def test_everything_else_is_test(self, api_key):
        """Anything without a live segment in position two is TEST."""
        assert key_mode(api_key) is Mode.TEST


class TestProfile:
    """Tests for Profile model."""

    def test_create_minimal_profile(self):
        """Test creating a profile with only a name."""
        profile = Profile(project_name="default")
        assert profile.project_name == "default"
        assert profile.get_api_key(Mode.TEST) is None
        assert profile.get_api_key(Mode.LIVE) is None
        assert profile.color is ColorPreference.AUTO

    def test_set_and_get_keys_per_mode(self):
        """Keys and expiries are tracked separately per tier."""
        profile = Profile(project_name="default")
        profile.set_api_key(Mode.TEST, "sk_test_1234abcd", expires_at=date(2099, 1, 2))
        profile.set_api_key(Mode.LIVE, "rk_live_0000000001")

        assert profile.get_api_key(Mode.TEST) == "sk_test_1234abcd"
        assert profile.get_api_key(Mode.LIVE) == "rk_live_0000000001"
        assert profile.get_expires_at(Mode.TEST) == date(2099, 1, 2)
        assert profile.get_expires_at(Mode.LIVE) is None

    def test_empty_key_reads_as_absent(self):
        """An empty stored key is not an active key."""
        profile = Profile(project_name="default", test_mode_api_key=SecretStr(""))
        assert profile.get_api_key(Mode.TEST) is None

    def test_repr_hides_secrets(self):
        """Secrets never show up in repr."""
        profile = Profile(
            project_name="default",
            test_mode_api_key=SecretStr("sk_test_1234abcd"),
            live_mode_api_key=SecretStr("rk_live_0000000001"),
        )
        assert "sk_test_1234abcd" not in repr(profile)
        assert "rk_live_0000000001" not in repr(profile)

    def test_model_dump_excludes_live_key(self):
        """The live key field is excluded from every dump."""
        profile = Profile(project_name="default", live_mode_api_key=SecretStr("rk_live_0000000001"))

        assert "live_mode_api_key" not in profile.model_dump()
        assert "live_mode_api_key" not in profile.model_dump(mode="json")
        assert "rk_live_0000000001" not in profile.model_dump_json()


class TestPlaintextRecord:
    """Tests for Profile.plaintext_record."""

    def test_contains_test_tier_and_metadata(self):
        """Test-tier key and descriptive fields are emitted."""
        profile = Profile(
            project_name="default",
            account_id="acct_123",
            display_name="Alice",
            test_mode_api_key=SecretStr("sk_test_1234abcd"),
            test_mode_key_expires_at=date(2099, 1, 2),
            live_mode_key_expires_at=date(2099, 2, 3),
        )

        assert profile.plaintext_record() == {
            "account_id": "acct_123",
            "display_name": "Alice",
            "test_mode_api_key": "sk_test_1234abcd",
            "test_mode_key_expires_at": "2099-01-02",
            "live_mode_key_expires_at": "2099-02-03",
        }

    def test_never_contains_live_key(self):
        """The live key never reaches the plaintext record."""
        profile = Profile(project_name="default")
        profile.set_api_key(Mode.LIVE, "rk_live_0000000001", expires_at=date(2099, 2, 3))

        record = profile.plaintext_record()

        assert "live_mode_api_key" not in record
        assert "rk_live_0000000001" not in str(record)
        assert record["live_mode_key_expires_at"] == "2099-02-03"

    def test_drops_unset_fields_and_default_color(self):
        """Unset fields and the default color are omitted."""
        assert Profile(project_name="default").plaintext_record() == {}

    def test_keeps_non_default_color(self):
        """A non-default color preference is persisted."""
        profile = Profile(project_name="default", color=ColorPreference.NEVER)
        assert profile.plaintext_record() == {"color": "never"}
