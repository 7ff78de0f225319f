"""
Tests for the in-memory password reset code store.

Run with: pytest tests/test_verification_codes.py -v
"""
from datetime import timedelta

import pytest

from app.features.auth.services.verification_codes import (
    VerificationCodeStore,
    VerifyOutcome,
    generate_code,
    normalize_email,
)


class TestGenerateCode:
    def test_six_digits_in_range(self):
        for _ in range(500):
            code = generate_code()
            assert len(code) == 6
            assert code.isdigit()
            assert 100000 <= int(code) <= 999999

    def test_store_delegates_to_generator(self, store):
        code = store.generate_code()
        assert 100000 <= int(code) <= 999999


def test_normalize_email():
    assert normalize_email("  Foo@Bar.COM ") == "foo@bar.com"


class TestVerify:
    def test_correct_code_succeeds_once(self, store):
        store.save("a@b.com", "123456")

        result = store.verify("a@b.com", "123456")
        assert result.outcome is VerifyOutcome.SUCCESS
        assert result.valid

        again = store.verify("a@b.com", "123456")
        assert again.outcome is VerifyOutcome.NOT_FOUND
        assert again.message == "code does not exist or has expired."

    def test_unknown_email_not_found(self, store):
        result = store.verify("nobody@b.com", "123456")
        assert result.outcome is VerifyOutcome.NOT_FOUND
        assert not result.valid

    def test_email_is_normalized(self, store):
        store.save("Foo@Bar.com", "123456")
        assert store.verify("  foo@bar.com ", "123456").outcome is VerifyOutcome.SUCCESS

    def test_mismatch_counts_down(self, store):
        store.save("a@b.com", "123456")

        remaining = [store.verify("a@b.com", "000000").remaining for _ in range(5)]

        assert remaining == [4, 3, 2, 1, 0]

    def test_mismatch_message_includes_remaining(self, store):
        store.save("a@b.com", "123456")
        result = store.verify("a@b.com", "000000")
        assert result.outcome is VerifyOutcome.MISMATCH
        assert "4" in result.message

    def test_sixth_call_is_rejected_even_with_correct_code(self, store):
        store.save("a@b.com", "123456")
        for _ in range(5):
            assert store.verify("a@b.com", "000000").outcome is VerifyOutcome.MISMATCH

        result = store.verify("a@b.com", "123456")
        assert result.outcome is VerifyOutcome.ATTEMPTS_EXHAUSTED
        assert result.message == "too many attempts, request a new one."
        assert len(store) == 0
        assert store.verify("a@b.com", "123456").outcome is VerifyOutcome.NOT_FOUND

    def test_fifth_guess_is_still_compared(self, store):
        store.save("a@b.com", "123456")
        for _ in range(4):
            store.verify("a@b.com", "000000")

        assert store.verify("a@b.com", "123456").outcome is VerifyOutcome.SUCCESS

    def test_expired_code_is_deleted(self, store, clock):
        store.save("a@b.com", "123456")
        clock.advance(minutes=15, seconds=1)

        result = store.verify("a@b.com", "123456")
        assert result.outcome is VerifyOutcome.EXPIRED
        assert result.message == "code has expired, request a new one."
        assert store.verify("a@b.com", "123456").outcome is VerifyOutcome.NOT_FOUND

    def test_code_valid_at_exact_expiry(self, store, clock):
        store.save("a@b.com", "123456")
        clock.advance(minutes=15)
        assert store.verify("a@b.com", "123456").outcome is VerifyOutcome.SUCCESS

    def test_expiry_wins_over_exhausted_attempts(self, store, clock):
        store.save("a@b.com", "123456")
        for _ in range(5):
            store.verify("a@b.com", "000000")
        clock.advance(minutes=16)

        assert store.verify("a@b.com", "123456").outcome is VerifyOutcome.EXPIRED

    def test_second_save_replaces_first_code(self, store):
        store.save("a@b.com", "111111")
        store.save("a@b.com", "222222")

        first = store.verify("a@b.com", "111111")
        assert first.outcome is VerifyOutcome.MISMATCH
        assert first.remaining == 4
        assert store.verify("a@b.com", "222222").outcome is VerifyOutcome.SUCCESS

    def test_second_save_resets_attempts_and_expiry(self, store, clock):
        store.save("a@b.com", "111111")
        for _ in range(3):
            store.verify("a@b.com", "000000")
        clock.advance(minutes=10)
        store.save("a@b.com", "222222")
        clock.advance(minutes=10)

        result = store.verify("a@b.com", "000000")
        assert result.outcome is VerifyOutcome.MISMATCH
        assert result.remaining == 4

    def test_reset_scenario(self, store):
        store.save("a@b.com", "482913")

        assert [store.verify("a@b.com", "000000").remaining for _ in range(3)] == [4, 3, 2]
        assert store.verify("a@b.com", "482913").outcome is VerifyOutcome.SUCCESS
        assert store.verify("a@b.com", "482913").outcome is VerifyOutcome.NOT_FOUND

    def test_custom_limits(self, clock):
        store = VerificationCodeStore(ttl=timedelta(minutes=1), max_attempts=2, clock=clock)
        store.save("a@b.com", "123456")

        assert store.verify("a@b.com", "000000").remaining == 1
        assert store.verify("a@b.com", "000000").remaining == 0
        assert store.verify("a@b.com", "123456").outcome is VerifyOutcome.ATTEMPTS_EXHAUSTED


class TestSweep:
    def test_removes_only_expired_entries(self, store, clock):
        store.save("old@b.com", "111111")
        clock.advance(minutes=10)
        store.save("new@b.com", "222222")
        clock.advance(minutes=6)

        assert store.sweep() == 1
        assert len(store) == 1
        assert store.verify("old@b.com", "111111").outcome is VerifyOutcome.NOT_FOUND
        assert store.verify("new@b.com", "222222").outcome is VerifyOutcome.SUCCESS

    def test_sweep_keeps_attempt_counts(self, store, clock):
        store.save("a@b.com", "123456")
        store.verify("a@b.com", "000000")
        clock.advance(minutes=5)

        assert store.sweep() == 0
        assert store.verify("a@b.com", "000000").remaining == 3

    @pytest.mark.parametrize("entries", [0, 3])
    def test_sweep_on_fresh_store(self, store, entries):
        for i in range(entries):
            store.save(f"user{i}@b.com", "123456")
        assert store.sweep() == 0
        assert len(store) == entries
