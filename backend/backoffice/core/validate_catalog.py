"""Catalog Rule Sets — books, categories and reviews.

Invariants:
    - AvailableCopies is checked against the sibling TotalCopies on every write
    - Create and update DTOs share one rule set per entity
    - Price is only checked when present
"""

from backoffice.core.validation import Validator


def _book_rules() -> Validator:
    v = Validator()
    v.rule_for("isbn").not_empty().length(10, 13)
    v.rule_for("title").not_empty().max_length(500)
    v.rule_for("author").not_empty().max_length(300)
    v.rule_for("publisher").max_length(100)
    v.rule_for("description").max_length(1000)
    v.rule_for("language").max_length(50)
    v.rule_for("image_url").max_length(500)
    v.rule_for("category_id").greater_than(0)
    v.rule_for("total_copies").greater_than_or_equal(0)
    (
        v.rule_for("available_copies")
        .greater_than_or_equal(0)
        .less_than_or_equal_field("total_copies")
        .with_message("'AvailableCopies' cannot exceed 'TotalCopies'.")
    )
    v.rule_for("page_count").greater_than_or_equal(0)
    (
        v.rule_for("price")
        .greater_than_or_equal(0)
        .when(lambda dto: dto.price is not None)
    )
    return v


def _category_rules() -> Validator:
    v = Validator()
    v.rule_for("name").not_empty().max_length(100)
    v.rule_for("description").max_length(500)
    (
        v.rule_for("parent_category_id")
        .greater_than(0)
        .when(lambda dto: dto.parent_category_id is not None)
    )
    return v


def _review_rules(with_refs: bool) -> Validator:
    v = Validator()
    if with_refs:
        v.rule_for("book_id").greater_than(0)
        v.rule_for("member_id").greater_than(0)
    v.rule_for("rating").inclusive_between(1, 5)
    v.rule_for("comment").max_length(1000)
    return v


def _review_reject_rules() -> Validator:
    v = Validator()
    v.rule_for("reason").not_empty().max_length(500)
    v.rule_for("notes").max_length(500)
    return v


BOOK_VALIDATOR = _book_rules()
CATEGORY_VALIDATOR = _category_rules()
REVIEW_CREATE_VALIDATOR = _review_rules(with_refs=True)
REVIEW_UPDATE_VALIDATOR = _review_rules(with_refs=False)
REVIEW_REJECT_VALIDATOR = _review_reject_rules()
