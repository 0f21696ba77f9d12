"""Tests for plaintext profile persistence."""

import os
import stat
import tomllib
from datetime import date
from unittest.mock import patch

import pytest
from pydantic import SecretStr

from stripe_profiles.credentials import (
    ColorPreference,
    InMemorySecureStore,
    Mode,
    Profile,
    ProfileNotFoundError,
    ProfileStore,
    ProfileStoreError,
)

CONFIG = """\
color = "never"

[test]
account_id = "acct_123"
display_name = "Alice"
test_mode_api_key = "sk_test_1234abcd"
test_mode_key_expires_at = "2099-01-02"
live_mode_key_expires_at = "2099-02-03"

[other]
display_name = "Bob"
color = "always"
"""


@pytest.fixture
def profiles_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(CONFIG)
    path.chmod(0o600)
    return path


def file_mode(path):
    return stat.S_IMODE(os.stat(path).st_mode)


class TestLoad:
    """Tests for ProfileStore.load."""

    def test_load_profile(self, profiles_file):
        """Test loading every plaintext field."""
        profile = ProfileStore(profiles_file).load("test")

        assert profile.project_name == "test"
        assert profile.account_id == "acct_123"
        assert profile.display_name == "Alice"
        assert profile.get_api_key(Mode.TEST) == "sk_test_1234abcd"
        assert profile.get_api_key(Mode.LIVE) is None
        assert profile.test_mode_key_expires_at == date(2099, 1, 2)
        assert profile.live_mode_key_expires_at == date(2099, 2, 3)

    def test_top_level_color_is_default(self, profiles_file):
        assert ProfileStore(profiles_file).load("test").color is ColorPreference.NEVER

    def test_section_color_wins(self, profiles_file):
        assert ProfileStore(profiles_file).load("other").color is ColorPreference.ALWAYS

    def test_profile_named_color(self, tmp_path):
        """A profile section called "color" is not read as the file-wide default."""
        store = ProfileStore(tmp_path / "config.toml")
        store.create_profile(Profile(project_name="default", account_id="acct_2"))
        store.create_profile(Profile(project_name="color", account_id="acct_1"))

        profile = store.load("default")

        assert profile.account_id == "acct_2"
        assert profile.color is ColorPreference.AUTO
        assert store.load("color").account_id == "acct_1"

    def test_invalid_top_level_color(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('color = "purple"\n\n[test]\ndisplay_name = "Alice"\n')

        with pytest.raises(ProfileStoreError):
            ProfileStore(path).load("test")

    def test_live_key_filled_from_secure_store(self, profiles_file):
        secure_store = InMemorySecureStore({"test.live_mode_api_key": "rk_live_0000000001"})

        profile = ProfileStore(profiles_file).load("test", secure_store=secure_store)

        assert profile.get_api_key(Mode.LIVE) == "rk_live_0000000001"

    def test_live_key_in_file_is_ignored(self, tmp_path, caplog):
        """A hand-edited live key in the plaintext file is never read."""
        path = tmp_path / "config.toml"
        path.write_text('[test]\nlive_mode_api_key = "rk_live_plaintext01"\n')

        profile = ProfileStore(path).load("test")

        assert profile.get_api_key(Mode.LIVE) is None
        assert "Ignoring live_mode_api_key" in caplog.text
        assert "rk_live_plaintext01" not in caplog.text

    def test_native_toml_dates(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[test]\ntest_mode_key_expires_at = 2099-01-02\n")

        assert ProfileStore(path).load("test").test_mode_key_expires_at == date(2099, 1, 2)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProfileNotFoundError):
            ProfileStore(tmp_path / "nope.toml").load("test")

    def test_missing_section(self, profiles_file):
        with pytest.raises(ProfileNotFoundError) as exc_info:
            ProfileStore(profiles_file).load("nope")
        assert "nope" in str(exc_info.value)

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[test\n")

        with pytest.raises(ProfileStoreError):
            ProfileStore(path).load("test")

    def test_invalid_field(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[test]\ncolor = "purple"\n')

        with pytest.raises(ProfileStoreError):
            ProfileStore(path).load("test")

    def test_list_profiles(self, profiles_file):
        assert ProfileStore(profiles_file).list_profiles() == ["test", "other"]


class TestCreateProfile:
    """Tests for ProfileStore.create_profile."""

    def test_new_file_is_owner_only(self, tmp_path):
        """A newly created file and directory are private."""
        path = tmp_path / "stripe" / "config.toml"
        ProfileStore(path).create_profile(Profile(project_name="default", display_name="Alice"))

        assert file_mode(path) == 0o600
        assert file_mode(path.parent) == 0o700

    def test_round_trip(self, tmp_path):
        store = ProfileStore(tmp_path / "config.toml")
        profile = Profile(
            project_name="default",
            account_id="acct_123",
            test_mode_api_key=SecretStr("sk_test_1234abcd"),
            test_mode_key_expires_at=date(2099, 1, 2),
        )

        store.create_profile(profile)
        loaded = store.load("default")

        assert loaded.account_id == "acct_123"
        assert loaded.get_api_key(Mode.TEST) == "sk_test_1234abcd"
        assert loaded.test_mode_key_expires_at == date(2099, 1, 2)

    def test_dates_are_written_as_strings(self, tmp_path):
        path = tmp_path / "config.toml"
        profile = Profile(project_name="default", live_mode_key_expires_at=date(2099, 2, 3))
        ProfileStore(path).create_profile(profile)

        assert 'live_mode_key_expires_at = "2099-02-03"' in path.read_text()

    def test_live_key_never_written(self, tmp_path):
        """The serialized file never contains the live key."""
        path = tmp_path / "config.toml"
        profile = Profile(project_name="default", test_mode_api_key=SecretStr("sk_test_1234abcd"))
        profile.set_api_key(Mode.LIVE, "rk_live_0000000001", expires_at=date(2099, 2, 3))

        ProfileStore(path).create_profile(profile)
        contents = path.read_text()

        assert "rk_live_0000000001" not in contents
        assert "live_mode_api_key" not in contents
        assert "sk_test_1234abcd" in contents

    def test_overwrites_only_its_section(self, profiles_file):
        """Re-creating a profile leaves other profiles and top-level keys alone."""
        store = ProfileStore(profiles_file)
        store.create_profile(Profile(project_name="test", display_name="Carol"))

        document = tomllib.loads(profiles_file.read_text())
        assert document["test"] == {"display_name": "Carol"}
        assert document["other"] == {"display_name": "Bob", "color": "always"}
        assert document["color"] == "never"

    def test_idempotent(self, tmp_path):
        path = tmp_path / "config.toml"
        store = ProfileStore(path)
        profile = Profile(project_name="default", display_name="Alice")

        store.create_profile(profile)
        first = path.read_text()
        store.create_profile(profile)

        assert path.read_text() == first

    def test_inherited_color_not_pinned(self, profiles_file):
        """Saving a profile doesn't copy the file-wide color into its section."""
        store = ProfileStore(profiles_file)
        profile = store.load("test")
        profile.display_name = "Carol"

        store.create_profile(profile)

        document = tomllib.loads(profiles_file.read_text())
        assert "color" not in document["test"]
        assert document["color"] == "never"

    def test_section_color_kept(self, profiles_file):
        store = ProfileStore(profiles_file)
        store.create_profile(store.load("other"))

        assert tomllib.loads(profiles_file.read_text())["other"]["color"] == "always"

    def test_changed_color_is_written(self, profiles_file):
        store = ProfileStore(profiles_file)
        profile = store.load("test")
        profile.color = ColorPreference.ALWAYS

        store.create_profile(profile)

        assert tomllib.loads(profiles_file.read_text())["test"]["color"] == "always"

    def test_existing_permissions_preserved(self, profiles_file):
        profiles_file.chmod(0o640)
        ProfileStore(profiles_file).create_profile(Profile(project_name="test"))

        assert file_mode(profiles_file) == 0o640

    def test_failed_write_leaves_file_untouched(self, profiles_file):
        """A failure during serialization doesn't modify the existing file."""
        target = "stripe_profiles.credentials.profile_store.tomli_w.dump"
        with patch(target, side_effect=OSError("disk full")):
            with pytest.raises(ProfileStoreError):
                ProfileStore(profiles_file).create_profile(Profile(project_name="test"))

        assert profiles_file.read_text() == CONFIG
        assert sorted(p.name for p in profiles_file.parent.iterdir()) == ["config.toml"]


class TestDeleteProfile:
    """Tests for ProfileStore.delete_profile."""

    def test_delete_existing(self, profiles_file):
        store = ProfileStore(profiles_file)

        assert store.delete_profile("other")
        assert store.list_profiles() == ["test"]

    def test_delete_missing(self, profiles_file, tmp_path):
        assert not ProfileStore(profiles_file).delete_profile("nope")
        assert not ProfileStore(tmp_path / "nope.toml").delete_profile("test")

    def test_delete_removes_live_key(self, profiles_file):
        """A recreated profile doesn't get the deleted profile's live key back."""
        secure_store = InMemorySecureStore(
            {
                "test.live_mode_api_key": "rk_live_0000000001",
                "other.live_mode_api_key": "rk_live_0000000002",
            }
        )
        store = ProfileStore(profiles_file)

        assert store.delete_profile("test", secure_store=secure_store)
        store.create_profile(Profile(project_name="test"))

        profile = store.load("test", secure_store=secure_store)
        assert profile.get_api_key(Mode.LIVE) is None
        assert secure_store.get("other.live_mode_api_key") == "rk_live_0000000002"

    def test_delete_without_secure_store_keeps_live_key(self, profiles_file):
        """Without a secure store only the file side is removed."""
        secure_store = InMemorySecureStore({"test.live_mode_api_key": "rk_live_0000000001"})

        ProfileStore(profiles_file).delete_profile("test")

        assert secure_store.get("test.live_mode_api_key") == "rk_live_0000000001"
