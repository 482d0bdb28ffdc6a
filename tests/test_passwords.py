"""Tests for the peppered PBKDF2 password hasher."""

from __future__ import annotations

import hashlib

import pytest

from security.passwords import (
    SALT_BYTES,
    PasswordConfigError,
    PasswordHasher,
    PasswordInputError,
    PasswordSettings,
)


def _hasher(**overrides) -> PasswordHasher:
    values = {"pepper": "pepper", "iterations": 1000, "keylen": 32, "digest": "sha256"}
    values.update(overrides)
    return PasswordHasher(PasswordSettings(**values))


def test_generated_salt_is_hex_of_fixed_length():
    password_hash, salt = _hasher().hash("secret")

    assert len(salt) == SALT_BYTES * 2
    int(salt, 16)
    assert len(password_hash) == 32 * 2


def test_hash_matches_pbkdf2_over_salt_and_pepper():
    password_hash, salt = _hasher().hash("secret", "abcd")

    expected = hashlib.pbkdf2_hmac("sha256", b"secret", b"abcdpepper", 1000, 32).hex()
    assert salt == "abcd"
    assert password_hash == expected


def test_hash_is_deterministic_for_same_salt():
    hasher = _hasher()

    assert hasher.hash("secret", "00ff") == hasher.hash("secret", "00ff")


def test_distinct_salts_give_distinct_hashes():
    hasher = _hasher()

    first, salt_one = hasher.hash("secret")
    second, salt_two = hasher.hash("secret")

    assert salt_one != salt_two
    assert first != second


def test_verify_round_trip_and_wrong_password():
    hasher = _hasher()
    stored_hash, stored_salt = hasher.hash("correct-password")

    assert hasher.verify("correct-password", stored_hash, stored_salt) is True
    assert hasher.verify("wrong-password", stored_hash, stored_salt) is False


def test_verify_is_case_sensitive_on_hex():
    hasher = _hasher()
    stored_hash, stored_salt = hasher.hash("secret")

    assert hasher.verify("secret", stored_hash.upper(), stored_salt) is False


def test_pepper_changes_hash():
    assert _hasher().hash("secret", "aa") != _hasher(pepper="other").hash("secret", "aa")


@pytest.mark.parametrize(
    "override",
    [{"iterations": 1001}, {"keylen": 33}, {"digest": "sha512"}],
)
def test_each_kdf_parameter_changes_hash(override):
    baseline, _ = _hasher().hash("secret", "aa")
    changed, _ = _hasher(**override).hash("secret", "aa")

    assert baseline != changed


@pytest.mark.parametrize("password", [None, 123, b"bytes"])
def test_non_string_password_is_rejected(password):
    with pytest.raises(PasswordInputError):
        _hasher().hash(password)


def test_non_string_salt_is_rejected():
    with pytest.raises(PasswordInputError):
        _hasher().hash("secret", b"salt")


def test_verify_rejects_non_string_stored_values():
    hasher = _hasher()

    with pytest.raises(PasswordInputError):
        hasher.verify("secret", None, "aa")
    with pytest.raises(PasswordInputError):
        hasher.verify("secret", "aa", None)


def test_input_error_is_a_type_error():
    assert issubclass(PasswordInputError, TypeError)


def test_settings_coerce_numeric_strings():
    settings = PasswordSettings(pepper="p", iterations="10", keylen="16", digest="sha256")

    assert settings.iterations == 10
    assert settings.keylen == 16


@pytest.mark.parametrize(
    "values",
    [
        {"pepper": "", "iterations": 1, "keylen": 1, "digest": "sha256"},
        {"pepper": "p", "iterations": 0, "keylen": 1, "digest": "sha256"},
        {"pepper": "p", "iterations": 1, "keylen": "many", "digest": "sha256"},
        {"pepper": "p", "iterations": 1, "keylen": 1, "digest": "not-a-digest"},
    ],
)
def test_invalid_settings_raise_config_error(values):
    with pytest.raises(PasswordConfigError):
        PasswordSettings(**values)


def test_from_mapping_reports_missing_keys():
    with pytest.raises(PasswordConfigError) as excinfo:
        PasswordSettings.from_mapping({"PASSWORD_ITERATIONS": 1, "PASSWORD_DIGEST": "sha256"})

    message = str(excinfo.value)
    assert "PASSWORD_PEPPER" in message
    assert "PASSWORD_KEYLEN" in message


def test_from_mapping_builds_settings():
    settings = PasswordSettings.from_mapping(
        {
            "PASSWORD_PEPPER": "p",
            "PASSWORD_ITERATIONS": "5",
            "PASSWORD_KEYLEN": "8",
            "PASSWORD_DIGEST": "sha1",
        }
    )

    assert settings == PasswordSettings(pepper="p", iterations=5, keylen=8, digest="sha1")


def test_verify_dummy_runs_kdf_and_fails():
    hasher = _hasher()
    calls = []
    original_hash = hasher.hash

    def counting_hash(password, salt=None):
        calls.append(password)
        return original_hash(password, salt)

    hasher.hash = counting_hash

    assert hasher.verify_dummy("secret") is False
    assert hasher.verify_dummy("secret") is False
    assert calls.count("secret") == 2
