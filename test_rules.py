"""
Tests for reminder rule parsing and normalization
"""
import pytest

from ohw_sentinel.configurations.ohw_config import (
    ANC_VISIT_MESSAGE,
    MISO_REMINDER_MESSAGE,
    OUTCOME_REQUEST_MESSAGE,
)
from ohw_sentinel.core.config import Settings
from ohw_sentinel.registrations.errors import ConfigurationError
from ohw_sentinel.registrations.rules import (
    CATEGORIES,
    DetailedRule,
    MessageType,
    ReminderRuleSet,
    SimpleRule,
    parse_rule,
)
from ohw_sentinel.utils.dates import TimeUnit

ANC_WEEKS, ANC_DAYS, MISO, UPCOMING, OUTCOME_WEEKS, OUTCOME_DAYS = CATEGORIES


def test_bare_number_is_a_simple_rule():
    assert parse_rule(16, ANC_WEEKS) == SimpleRule(offset=16)
    assert parse_rule("16", ANC_WEEKS) == SimpleRule(offset=16)
    assert parse_rule(16.0, ANC_WEEKS) == SimpleRule(offset=16)


def test_simple_rule_normalizes_to_category_defaults():
    rule = ANC_WEEKS.normalize(SimpleRule(offset=16))
    assert rule == DetailedRule(
        offset=16,
        unit=TimeUnit.WEEKS,
        message=ANC_VISIT_MESSAGE,
        type=MessageType.ANC_VISIT,
        group=None,
    )


def test_detailed_rule_keeps_its_own_unit_message_group_and_type():
    rule = parse_rule(
        {"days": 39, "message": "X", "group": 2, "type": "upcoming_delivery"},
        ANC_WEEKS,
    )
    assert rule == DetailedRule(
        offset=39,
        unit=TimeUnit.DAYS,
        message="X",
        type=MessageType.UPCOMING_DELIVERY,
        group=2,
    )


def test_detailed_rule_falls_back_to_category_message_and_type():
    rule = parse_rule({"weeks": 32}, MISO)
    assert rule.unit == TimeUnit.WEEKS
    assert rule.message == MISO_REMINDER_MESSAGE
    assert rule.type == MessageType.MISO_REMINDER


def test_offset_with_explicit_unit_and_time_key():
    assert parse_rule({"offset": 4, "unit": "weeks"}, ANC_DAYS).unit == TimeUnit.WEEKS
    rule = parse_rule({"time_key": "weeks", "weeks": 41}, OUTCOME_DAYS)
    assert (rule.offset, rule.unit, rule.message) == (41, TimeUnit.WEEKS, OUTCOME_REQUEST_MESSAGE)


def test_bare_offset_key_uses_category_unit():
    assert parse_rule({"offset": 280}, UPCOMING).unit == TimeUnit.DAYS


@pytest.mark.parametrize(
    "raw",
    [
        "soon",
        1.5,
        -3,
        True,
        None,
        [12],
        {},
        {"message": "no offset"},
        {"days": "x"},
        {"days": 3, "weeks": 1},
        {"offset": 3, "unit": "months"},
        {"days": 3, "type": "birthday"},
        {"days": 3, "message": 42},
    ],
)
def test_malformed_rules_are_configuration_errors(raw):
    with pytest.raises(ConfigurationError):
        parse_rule(raw, ANC_DAYS)


def test_rule_set_iterates_in_category_order():
    rule_set = ReminderRuleSet.from_mapping({
        "OUTCOME_REQUEST_DAYS": [300],
        "REMINDER_SCHEDULE_WEEKS": [16, 24],
        "MISO_REMINDER_DAYS": [{"days": 224, "group": 3}],
    })
    assert len(rule_set) == 4
    assert [(category.name, rule.offset) for category, rule in rule_set] == [
        ("anc_weeks", 16),
        ("anc_weeks", 24),
        ("miso_days", 224),
        ("outcome_request_days", 300),
    ]
    assert UPCOMING not in {category for category, _ in rule_set}


def test_rule_set_error_names_the_setting_and_index():
    with pytest.raises(ConfigurationError, match=r"REMINDER_SCHEDULE_DAYS\[1\]"):
        ReminderRuleSet.from_mapping({"REMINDER_SCHEDULE_DAYS": [10, "ten"]})


def test_rule_set_rejects_non_list_setting():
    with pytest.raises(ConfigurationError):
        ReminderRuleSet.from_mapping({"MISO_REMINDER_DAYS": 224})


def test_rule_set_from_settings():
    settings = Settings(
        REMINDER_SCHEDULE_WEEKS=[16, {"weeks": 24, "group": 1}],
        OUTCOME_REQUEST_WEEKS=[42],
    )
    rule_set = ReminderRuleSet.from_settings(settings)
    assert len(rule_set) == 3
    rules = [(category, rule) for category, rule in rule_set]
    assert rules[1] == (ANC_WEEKS, DetailedRule(24, TimeUnit.WEEKS, ANC_VISIT_MESSAGE, MessageType.ANC_VISIT, group=1))
    assert rules[2][0] == OUTCOME_WEEKS
    assert rules[2][1].type == MessageType.OUTCOME_REQUEST
