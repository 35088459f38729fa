import hashlib
import re

import pytest

from rest_server.services import password_hasher


def test_derive_is_deterministic():
    first = password_hasher.derive("alice", "hunter12")
    second = password_hasher.derive("alice", "hunter12")

    assert first == second
    assert len(first) == 128
    assert re.fullmatch(r"[0-9a-f]{128}", first)


def test_derive_matches_pbkdf2_sha512_with_md5_username_salt():
    salt = hashlib.md5(b"alice").hexdigest().encode()
    expected = hashlib.pbkdf2_hmac("sha512", b"hunter12", salt, 10000, 64).hex()

    assert password_hasher.derive("alice", "hunter12") == expected


def test_salt_is_lowercase_hex_md5_of_username():
    assert password_hasher.username_salt("alice") == hashlib.md5(b"alice").hexdigest().encode()
    assert password_hasher.username_salt("alice").decode() == password_hasher.username_salt("alice").decode().lower()


@pytest.mark.parametrize("other", ["bob", "Alice", "alice2"])
def test_different_usernames_give_different_hashes(other):
    assert password_hasher.derive("alice", "hunter12") != password_hasher.derive(other, "hunter12")


def test_hash_never_contains_password():
    assert "hunter12" not in password_hasher.derive("alice", "hunter12")


async def test_async_form_matches_blocking_form():
    assert await password_hasher.derive_async("alice", "hunter12") == password_hasher.derive("alice", "hunter12")


def test_verify():
    stored = password_hasher.derive("alice", "hunter12")

    assert password_hasher.verify("alice", "hunter12", stored) is True
    assert password_hasher.verify("alice", "hunter13", stored) is False
    assert password_hasher.verify("bob", "hunter12", stored) is False


def test_non_ascii_input():
    assert len(password_hasher.derive("jürgen", "pässwörd")) == 128
