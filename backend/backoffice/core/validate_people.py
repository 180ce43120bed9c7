"""People Rule Sets — members and librarians.

Invariants:
    - CurrentBooksCount never exceeds MaxBooksAllowed; both >= 0
    - Money fields (TotalFinesOwed, MaxFineLimit) are >= 0
    - Membership end date is on or after its start date
    - Librarian hire date cannot be in the future
"""

from backoffice.core.validation import Validator


def _member_rules() -> Validator:
    v = Validator()
    v.rule_for("membership_number").not_empty().max_length(50)
    v.rule_for("first_name").not_empty().max_length(100)
    v.rule_for("last_name").not_empty().max_length(100)
    v.rule_for("email").not_empty().email().max_length(200)
    v.rule_for("phone_number").max_length(20)
    v.rule_for("address").max_length(500)
    v.rule_for("date_of_birth").not_in_future()
    v.rule_for("max_books_allowed").greater_than_or_equal(0)
    (
        v.rule_for("current_books_count")
        .greater_than_or_equal(0)
        .less_than_or_equal_field("max_books_allowed")
        .with_message("'CurrentBooksCount' cannot exceed 'MaxBooksAllowed'.")
    )
    v.rule_for("total_fines_owed").greater_than_or_equal(0)
    v.rule_for("max_fine_limit").greater_than_or_equal(0)
    (
        v.rule_for("membership_end_date")
        .greater_than_or_equal_field("membership_start_date")
    )
    return v


def _extend_membership_rules() -> Validator:
    v = Validator()
    v.rule_for("months").inclusive_between(1, 60)
    return v


def _librarian_rules(with_employee_fields: bool) -> Validator:
    v = Validator()
    if with_employee_fields:
        v.rule_for("employee_number").not_empty().max_length(50)
        v.rule_for("hire_date").not_empty().not_in_future()
    v.rule_for("first_name").not_empty().max_length(100)
    v.rule_for("last_name").not_empty().max_length(100)
    v.rule_for("email").not_empty().email().max_length(200)
    v.rule_for("phone_number").max_length(20)
    v.rule_for("department").max_length(100)
    return v


def _change_role_rules() -> Validator:
    v = Validator()
    v.rule_for("new_role").not_empty()
    v.rule_for("reason").max_length(200)
    return v


MEMBER_VALIDATOR = _member_rules()
EXTEND_MEMBERSHIP_VALIDATOR = _extend_membership_rules()
LIBRARIAN_CREATE_VALIDATOR = _librarian_rules(with_employee_fields=True)
LIBRARIAN_UPDATE_VALIDATOR = _librarian_rules(with_employee_fields=False)
CHANGE_ROLE_VALIDATOR = _change_role_rules()
