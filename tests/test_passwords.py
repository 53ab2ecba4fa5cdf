import pytest

from opadmin.auth.passwords import ALPHABET, PASSWORD_LENGTH, PasswordHasher, generate_password


@pytest.fixture(scope="module")
def hasher():
    return PasswordHasher(time_cost=1)


def test_alphabet_is_62_alphanumerics():
    assert len(ALPHABET) == 62
    assert len(set(ALPHABET)) == 62
    assert ALPHABET.isalnum()


def test_generate_password_shape():
    for _ in range(50):
        pw = generate_password()
        assert len(pw) == PASSWORD_LENGTH == 16
        assert set(pw) <= set(ALPHABET)


def test_generate_password_calls_are_independent():
    assert generate_password() != generate_password()
    assert len({generate_password() for _ in range(100)}) == 100


def test_generate_password_rejects_non_positive_length():
    with pytest.raises(ValueError):
        generate_password(0)


def test_hash_then_verify(hasher):
    digest = hasher.hash("Secret123")
    assert digest != "Secret123"
    assert digest.startswith("$argon2id$")
    assert hasher.verify("Secret123", digest)
    assert not hasher.verify("Secret124", digest)


def test_hash_is_salted(hasher):
    assert hasher.hash("same") != hasher.hash("same")


def test_hash_rejects_empty_password(hasher):
    with pytest.raises(ValueError):
        hasher.hash("")


@pytest.mark.parametrize("digest", [None, "", "not-a-hash", "$argon2id$v=19$broken"])
def test_verify_returns_false_for_missing_or_malformed_digest(hasher, digest):
    assert hasher.verify("whatever", digest) is False


def test_verify_returns_false_for_empty_plaintext(hasher):
    assert hasher.verify("", hasher.hash("x")) is False


def test_cost_factor_is_configurable():
    ph = PasswordHasher(time_cost=2)
    assert "t=2" in ph.hash("abc")


def _count_argon2_verifies(monkeypatch):
    import argon2

    calls = []
    original = argon2.PasswordHasher.verify

    def _spy(self, hash_value, plain):
        calls.append(hash_value)
        return original(self, hash_value, plain)

    monkeypatch.setattr(argon2.PasswordHasher, "verify", _spy)
    return calls


@pytest.mark.parametrize("plain,digest", [("guess", None), ("guess", ""), ("", None)])
def test_missing_digest_still_costs_a_verification(monkeypatch, plain, digest):
    ph = PasswordHasher(time_cost=1)
    calls = _count_argon2_verifies(monkeypatch)
    assert ph.verify(plain, digest) is False
    assert len(calls) == 1
