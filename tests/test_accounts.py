from __future__ import annotations

import pytest

from moneyxfer.errors import (
    BalanceOverflowError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidNameError,
    NotFoundError,
)
from moneyxfer.ledger.accounts import MAX_STORE_INT


def test_create_account_starts_at_zero(ledger) -> None:
    a = ledger.create_account("Alice")
    b = ledger.create_account("  Bob  ")

    assert a != b
    assert ledger.check_balance(a) == 0

    acct = ledger.get_account(b)
    assert acct.id == b
    assert acct.name == "Bob"
    assert acct.balance == 0
    assert acct.created_ts_ms > 0


@pytest.mark.parametrize("name", ["", "   ", None])
def test_create_account_rejects_empty_name(ledger, name) -> None:
    with pytest.raises(InvalidNameError):
        ledger.create_account(name)


def test_verify_account(ledger) -> None:
    a = ledger.create_account("Alice")

    assert ledger.verify_account(a) is True
    assert ledger.verify_account(a + 1000) is False
    assert ledger.verify_account("1") is False
    assert ledger.verify_account(True) is False


def test_check_balance_unknown_account(ledger) -> None:
    with pytest.raises(NotFoundError) as ei:
        ledger.check_balance(424242)
    assert ei.value.code == "account_not_found"


def test_reads_are_idempotent(ledger) -> None:
    a = ledger.create_account("Alice")
    ledger.deposit_money(a, 75)

    assert [ledger.check_balance(a) for _ in range(3)] == [75, 75, 75]
    assert [ledger.verify_account(a) for _ in range(3)] == [True, True, True]
    assert [ledger.verify_account(a + 1) for _ in range(3)] == [False, False, False]


def test_deposit_then_withdraw(ledger) -> None:
    a = ledger.create_account("Alice")
    ledger.deposit_money(a, 500)
    ledger.withdraw_money(a, 200)
    assert ledger.check_balance(a) == 300

    # Withdrawing the exact balance is allowed.
    ledger.withdraw_money(a, 300)
    assert ledger.check_balance(a) == 0


def test_withdraw_insufficient_funds_leaves_balance(ledger) -> None:
    a = ledger.create_account("Alice")
    ledger.deposit_money(a, 100)

    with pytest.raises(InsufficientFundsError) as ei:
        ledger.withdraw_money(a, 101)
    assert ei.value.details == {"account_id": a, "balance": 100, "amount": 101}
    assert ledger.check_balance(a) == 100


@pytest.mark.parametrize("amount", [0, -1, -500, 1.5, "10", True, None])
def test_non_positive_or_non_integer_amounts_never_mutate(ledger, amount) -> None:
    a = ledger.create_account("Alice")
    ledger.deposit_money(a, 50)

    with pytest.raises(InvalidAmountError):
        ledger.withdraw_money(a, amount)
    with pytest.raises(InvalidAmountError):
        ledger.deposit_money(a, amount)

    assert ledger.check_balance(a) == 50


def test_invalid_amount_is_reported_before_missing_account(ledger) -> None:
    with pytest.raises(InvalidAmountError):
        ledger.withdraw_money(999, 0)
    with pytest.raises(InvalidAmountError):
        ledger.deposit_money(999, -5)


def test_missing_account_is_reported_before_insufficient_funds(ledger) -> None:
    with pytest.raises(NotFoundError):
        ledger.withdraw_money(999, 10)


def test_deposit_to_missing_account(ledger) -> None:
    with pytest.raises(NotFoundError):
        ledger.deposit_money(999, 10)


def test_operations_inside_a_caller_scope_are_left_uncommitted(ledger) -> None:
    a = ledger.create_account("Alice")
    ledger.deposit_money(a, 100)

    sc = ledger.db.scope()
    sc.begin()
    ledger.accounts.withdraw_money(a, 40, scope=sc)
    assert ledger.accounts.check_balance(a, scope=sc) == 60

    # Outside the scope nothing has changed yet.
    assert ledger.check_balance(a) == 100
    assert sc.is_open

    sc.abort()
    assert ledger.check_balance(a) == 100


@pytest.mark.parametrize("account_id", [0, -1, MAX_STORE_INT + 1, 2**80])
def test_ids_outside_the_store_range_name_no_account(ledger, account_id) -> None:
    ledger.create_account("Alice")

    assert ledger.verify_account(account_id) is False
    with pytest.raises(NotFoundError):
        ledger.check_balance(account_id)
    with pytest.raises(NotFoundError):
        ledger.get_account(account_id)
    with pytest.raises(NotFoundError):
        ledger.deposit_money(account_id, 1)


def test_amount_above_the_store_range_is_invalid(ledger) -> None:
    a = ledger.create_account("Alice")
    ledger.deposit_money(a, 50)

    with pytest.raises(InvalidAmountError) as ei:
        ledger.deposit_money(a, MAX_STORE_INT + 1)
    assert ei.value.details == {"amount": MAX_STORE_INT + 1, "max": MAX_STORE_INT}
    with pytest.raises(InvalidAmountError):
        ledger.withdraw_money(a, 2**64)

    assert ledger.check_balance(a) == 50


def test_deposit_past_the_maximum_balance_is_refused(ledger) -> None:
    a = ledger.create_account("Alice")
    ledger.deposit_money(a, MAX_STORE_INT)

    with pytest.raises(BalanceOverflowError) as ei:
        ledger.deposit_money(a, 1)
    assert ei.value.code == "balance_overflow"
    assert ei.value.details["balance"] == MAX_STORE_INT

    balance = ledger.check_balance(a)
    assert balance == MAX_STORE_INT
    assert type(balance) is int
    assert ledger.db.query("SELECT typeof(balance) AS t FROM accounts WHERE id=?;", (a,))[0]["t"] == "integer"
