"""Insight Rule Sets — statistics ranges, rankings, trends and search queries.

Invariants:
    - A statistics date range is ordered when both ends are given
    - Rankings return between 1 and 100 entries
    - Search text is required and at most 200 characters; suggestions cap at 50
"""

from backoffice.core.domain_types import MembershipType
from backoffice.core.validation import Validator

MAX_TOP_COUNT = 100
MAX_SUGGESTIONS = 50
MAX_QUERY_LENGTH = 200
SEARCH_SOURCES = ("books", "members", "librarians")


def _range_rules(v: Validator) -> Validator:
    (
        v.rule_for("from_date")
        .less_than_or_equal_field("to_date")
        .with_message("'FromDate' must be on or before 'ToDate'.")
    )
    return v


def _ranking_rules() -> Validator:
    v = Validator()
    v.rule_for("top_count").inclusive_between(1, MAX_TOP_COUNT)
    v.rule_for("category_id").greater_than(0)
    v.rule_for("membership_type").one_of([t.value for t in MembershipType])
    return _range_rules(v)


def _trends_rules() -> Validator:
    v = Validator()
    v.rule_for("year").inclusive_between(1900, 2100)
    return v


def _global_search_rules() -> Validator:
    v = Validator()
    v.rule_for("query").not_empty().max_length(MAX_QUERY_LENGTH)
    v.rule_for("type").one_of(SEARCH_SOURCES)
    return v


def _suggestion_rules() -> Validator:
    v = Validator()
    v.rule_for("query").not_empty().max_length(MAX_QUERY_LENGTH)
    v.rule_for("max_results").inclusive_between(1, MAX_SUGGESTIONS)
    return v


STATISTICS_RANGE_VALIDATOR = _range_rules(Validator())
RANKING_VALIDATOR = _ranking_rules()
TRENDS_VALIDATOR = _trends_rules()
GLOBAL_SEARCH_VALIDATOR = _global_search_rules()
SUGGESTION_VALIDATOR = _suggestion_rules()
