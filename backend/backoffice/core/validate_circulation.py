"""Circulation Rule Sets — borrow/return/renew, reservations and fine settlement.

Invariants:
    - Loan length 1..90 days; renewal extension 1..30 days
    - Reservation priority 1..10
    - Payments must be strictly positive and name a payment method
"""

from backoffice.core.validation import Validator


def _borrow_rules() -> Validator:
    v = Validator()
    v.rule_for("book_id").greater_than(0)
    v.rule_for("member_id").greater_than(0)
    v.rule_for("days").inclusive_between(1, 90)
    v.rule_for("notes").max_length(500)
    return v


def _return_rules() -> Validator:
    v = Validator()
    v.rule_for("transaction_id").greater_than(0)
    v.rule_for("notes").max_length(500)
    return v


def _renew_rules() -> Validator:
    v = Validator()
    v.rule_for("transaction_id").greater_than(0)
    v.rule_for("additional_days").inclusive_between(1, 30)
    v.rule_for("notes").max_length(500)
    return v


def _reservation_rules() -> Validator:
    v = Validator()
    v.rule_for("book_id").greater_than(0)
    v.rule_for("member_id").greater_than(0)
    v.rule_for("priority").inclusive_between(1, 10)
    v.rule_for("notes").max_length(500)
    return v


def _cancel_reservation_rules() -> Validator:
    v = Validator()
    v.rule_for("reason").max_length(200)
    return v


def _pay_fine_rules() -> Validator:
    v = Validator()
    v.rule_for("amount").greater_than(0)
    v.rule_for("payment_method").not_empty().max_length(50)
    v.rule_for("reference_number").max_length(100)
    v.rule_for("notes").max_length(500)
    return v


def _waive_fine_rules() -> Validator:
    v = Validator()
    v.rule_for("reason").not_empty().max_length(200)
    v.rule_for("notes").max_length(500)
    return v


BORROW_VALIDATOR = _borrow_rules()
RETURN_VALIDATOR = _return_rules()
RENEW_VALIDATOR = _renew_rules()
RESERVATION_VALIDATOR = _reservation_rules()
CANCEL_RESERVATION_VALIDATOR = _cancel_reservation_rules()
PAY_FINE_VALIDATOR = _pay_fine_rules()
WAIVE_FINE_VALIDATOR = _waive_fine_rules()
