"""Operations Rule Sets — notifications, alerts, reports and import/export requests.

Invariants:
    - Alert severity is one of Low/Medium/High/Critical; priority 1..5
    - Report date range is ordered when both ends are given
    - Bulk operations are bounded (100 notification ids, 500 recipients)
"""

from backoffice.core.domain_types import (
    AlertSeverity, EXPORT_FORMATS, EXPORT_TYPES, IMPORT_TYPES,
    REPORT_FORMATS, ReportType,
)
from backoffice.core.validation import Validator

MAX_BULK_READ_IDS = 100
MAX_BULK_RECIPIENTS = 500


def _notification_body_rules(v: Validator) -> Validator:
    v.rule_for("title").not_empty().max_length(200)
    v.rule_for("message").not_empty().max_length(1000)
    v.rule_for("related_entity_type").max_length(50)
    return v


def _notification_rules() -> Validator:
    v = Validator()
    v.rule_for("member_id").greater_than(0)
    return _notification_body_rules(v)


def _bulk_notification_rules() -> Validator:
    v = Validator()
    (
        v.rule_for("member_ids").not_empty()
        .must(lambda ids: ids is None or len(ids) <= MAX_BULK_RECIPIENTS,
              f"'MemberIds' cannot contain more than {MAX_BULK_RECIPIENTS} ids.")
    )
    return _notification_body_rules(v)


def _mark_read_rules() -> Validator:
    v = Validator()
    (
        v.rule_for("notification_ids").not_empty()
        .must(lambda ids: ids is None or len(ids) <= MAX_BULK_READ_IDS,
              f"'NotificationIds' cannot contain more than {MAX_BULK_READ_IDS} ids.")
    )
    return v


_SEVERITIES = [s.value for s in AlertSeverity]


def _alert_rules() -> Validator:
    v = Validator()
    v.rule_for("title").not_empty().max_length(100)
    v.rule_for("message").not_empty().max_length(500)
    v.rule_for("alert_type").not_empty().max_length(50)
    v.rule_for("severity").not_empty().one_of(_SEVERITIES)
    v.rule_for("priority").inclusive_between(1, 5)
    v.rule_for("source").max_length(100)
    return v


def _alert_update_rules() -> Validator:
    v = Validator()
    v.rule_for("title").max_length(100)
    v.rule_for("message").max_length(500)
    v.rule_for("alert_type").max_length(50)
    v.rule_for("severity").one_of(_SEVERITIES)
    v.rule_for("priority").inclusive_between(1, 5)
    return v


def _report_rules() -> Validator:
    v = Validator()
    v.rule_for("report_type").not_empty().one_of([t.value for t in ReportType])
    v.rule_for("format").not_empty().one_of(REPORT_FORMATS)
    (
        v.rule_for("from_date")
        .less_than_or_equal_field("to_date")
        .with_message("'FromDate' must be on or before 'ToDate'.")
    )
    return v


def _import_rules() -> Validator:
    v = Validator()
    v.rule_for("import_type").not_empty().one_of(IMPORT_TYPES)
    v.rule_for("file_name").max_length(255)
    v.rule_for("content").not_empty()
    return v


def _export_rules() -> Validator:
    v = Validator()
    v.rule_for("export_type").not_empty().one_of(EXPORT_TYPES)
    v.rule_for("format").not_empty().one_of(EXPORT_FORMATS)
    return v


NOTIFICATION_VALIDATOR = _notification_rules()
BULK_NOTIFICATION_VALIDATOR = _bulk_notification_rules()
MARK_READ_VALIDATOR = _mark_read_rules()
ALERT_CREATE_VALIDATOR = _alert_rules()
ALERT_UPDATE_VALIDATOR = _alert_update_rules()
REPORT_VALIDATOR = _report_rules()
IMPORT_VALIDATOR = _import_rules()
EXPORT_VALIDATOR = _export_rules()
