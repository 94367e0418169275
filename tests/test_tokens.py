# =============================================================================
# tests/test_tokens.py - Token Manager Tests
# =============================================================================

from datetime import timedelta

import pytest

from utils.jwt import BadSignature, ExpiredToken, MalformedToken, TokenManager

CLAIMS = {"sub": "65f0c0ffee0000000000abcd", "email": "a@x.com"}


@pytest.fixture
def tokens():
    return TokenManager("unit-test-secret")


class TestIssueVerify:
    """Tokens verify until they expire."""

    def test_roundtrip(self, tokens):
        payload = tokens.verify(tokens.issue(CLAIMS))

        assert payload["sub"] == CLAIMS["sub"]
        assert payload["email"] == CLAIMS["email"]
        assert payload["exp"] > payload["iat"]

    def test_sub_is_stringified(self, tokens):
        payload = tokens.verify(tokens.issue({"sub": 42, "email": "b@x.com"}))
        assert payload["sub"] == "42"

    def test_expired_token_is_rejected(self, tokens):
        token = tokens.issue(CLAIMS, ttl=timedelta(seconds=-1))

        with pytest.raises(ExpiredToken):
            tokens.verify(token)

    def test_default_ttl_is_seven_days(self, tokens):
        payload = tokens.verify(tokens.issue(CLAIMS))
        assert payload["exp"] - payload["iat"] == int(timedelta(days=7).total_seconds())

    def test_issue_requires_identity_claims(self, tokens):
        with pytest.raises(ValueError):
            tokens.issue({"sub": "abc"})


class TestRejections:
    """Each failure mode is reported distinctly."""

    def test_foreign_secret_is_bad_signature(self, tokens):
        other = TokenManager("another-secret")

        with pytest.raises(BadSignature):
            tokens.verify(other.issue(CLAIMS))

    def test_tampered_signature(self, tokens):
        token = tokens.issue(CLAIMS)
        head, body, sig = token.split(".")
        flipped = ("A" if sig[0] != "A" else "B") + sig[1:]

        with pytest.raises(BadSignature):
            tokens.verify(".".join([head, body, flipped]))

    def test_garbage_is_malformed(self, tokens):
        with pytest.raises(MalformedToken):
            tokens.verify("not-a-token")

    def test_expired_with_foreign_secret_is_bad_signature(self, tokens):
        other = TokenManager("another-secret")
        token = other.issue(CLAIMS, ttl=timedelta(seconds=-1))

        with pytest.raises(BadSignature):
            tokens.verify(token)


class TestConstruction:

    @pytest.mark.parametrize("secret", [None, "", "   "])
    def test_secret_is_required(self, secret):
        with pytest.raises(RuntimeError):
            TokenManager(secret)

    def test_instances_are_independent(self):
        a = TokenManager("secret-a")
        b = TokenManager("secret-b")

        assert a.verify(a.issue(CLAIMS))["email"] == "a@x.com"
        with pytest.raises(BadSignature):
            b.verify(a.issue(CLAIMS))
