"""
Reminder rules and categories.

A rule in configuration is either a bare offset (``39``) or an object such as
``{"days": 39, "message": "...", "group": 2, "type": "anc_visit"}``. Rules are
parsed into ``SimpleRule``/``DetailedRule`` once, then normalized against their
category so the scheduler only ever sees ``DetailedRule``.
"""
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from ohw_sentinel.configurations.ohw_config import (
    ANC_VISIT_MESSAGE,
    MISO_REMINDER_MESSAGE,
    OUTCOME_REQUEST_MESSAGE,
    UPCOMING_DELIVERY_MESSAGE,
)
from ohw_sentinel.utils.dates import TimeUnit
from .errors import ConfigurationError


class MessageType(str, Enum):
    ANC_VISIT = "anc_visit"
    MISO_REMINDER = "miso_reminder"
    UPCOMING_DELIVERY = "upcoming_delivery"
    OUTCOME_REQUEST = "outcome_request"


@dataclass(frozen=True)
class SimpleRule:
    """Bare offset in the category's default unit"""
    offset: int


@dataclass(frozen=True)
class DetailedRule:
    offset: int
    unit: TimeUnit
    message: str
    type: MessageType
    group: Optional[Any] = None


RuleSpec = Union[SimpleRule, DetailedRule]


@dataclass(frozen=True)
class ReminderCategory:
    name: str
    setting: str
    unit: TimeUnit
    message_type: MessageType
    message: str

    def normalize(self, rule: RuleSpec) -> DetailedRule:
        if isinstance(rule, DetailedRule):
            return rule
        return DetailedRule(
            offset=rule.offset,
            unit=self.unit,
            message=self.message,
            type=self.message_type,
        )


CATEGORIES: Tuple[ReminderCategory, ...] = (
    ReminderCategory("anc_weeks", "REMINDER_SCHEDULE_WEEKS", TimeUnit.WEEKS, MessageType.ANC_VISIT, ANC_VISIT_MESSAGE),
    ReminderCategory("anc_days", "REMINDER_SCHEDULE_DAYS", TimeUnit.DAYS, MessageType.ANC_VISIT, ANC_VISIT_MESSAGE),
    ReminderCategory("miso_days", "MISO_REMINDER_DAYS", TimeUnit.DAYS, MessageType.MISO_REMINDER, MISO_REMINDER_MESSAGE),
    ReminderCategory("upcoming_delivery_days", "UPCOMING_DELIVERY_DAYS", TimeUnit.DAYS, MessageType.UPCOMING_DELIVERY, UPCOMING_DELIVERY_MESSAGE),
    ReminderCategory("outcome_request_weeks", "OUTCOME_REQUEST_WEEKS", TimeUnit.WEEKS, MessageType.OUTCOME_REQUEST, OUTCOME_REQUEST_MESSAGE),
    ReminderCategory("outcome_request_days", "OUTCOME_REQUEST_DAYS", TimeUnit.DAYS, MessageType.OUTCOME_REQUEST, OUTCOME_REQUEST_MESSAGE),
)


def _parse_offset(value: Any, where: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{where}: offset must be a number, got {value!r}")
    if isinstance(value, str):
        text = value.strip()
        try:
            value = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                raise ConfigurationError(f"{where}: offset {value!r} is not a number") from None
    if isinstance(value, float):
        if not value.is_integer():
            raise ConfigurationError(f"{where}: offset {value!r} is not a whole number")
        value = int(value)
    if not isinstance(value, int):
        raise ConfigurationError(f"{where}: offset must be a number, got {value!r}")
    if value < 0:
        raise ConfigurationError(f"{where}: offset {value} is negative")
    return value


def _parse_unit(value: Any, where: str) -> TimeUnit:
    try:
        return TimeUnit(value)
    except ValueError:
        raise ConfigurationError(f"{where}: unknown time unit {value!r}") from None


def parse_rule(raw: Any, category: ReminderCategory, where: str = "") -> RuleSpec:
    """Parse one configured rule entry.

    Raises ConfigurationError for anything that is not a usable rule.
    """
    where = where or category.setting
    if not isinstance(raw, Mapping):
        if raw is None or isinstance(raw, (list, tuple, dict)):
            raise ConfigurationError(f"{where}: unsupported rule {raw!r}")
        return SimpleRule(offset=_parse_offset(raw, where))

    explicit_unit = raw.get("time_key", raw.get("unit"))
    if explicit_unit is not None:
        unit = _parse_unit(explicit_unit, where)
        offset_value = raw.get(unit.value, raw.get("offset"))
    elif "weeks" in raw and "days" in raw:
        raise ConfigurationError(f"{where}: rule sets both 'weeks' and 'days'")
    elif "weeks" in raw:
        unit, offset_value = TimeUnit.WEEKS, raw["weeks"]
    elif "days" in raw:
        unit, offset_value = TimeUnit.DAYS, raw["days"]
    else:
        unit, offset_value = category.unit, raw.get("offset")

    if offset_value is None:
        raise ConfigurationError(f"{where}: rule has no offset")

    message_type = raw.get("type") or category.message_type
    try:
        message_type = MessageType(message_type)
    except ValueError:
        raise ConfigurationError(f"{where}: unknown message type {message_type!r}") from None

    message = raw.get("message") or category.message
    if not isinstance(message, str):
        raise ConfigurationError(f"{where}: message must be a string")

    return DetailedRule(
        offset=_parse_offset(offset_value, where),
        unit=unit,
        message=message,
        type=message_type,
        group=raw.get("group"),
    )


class ReminderRuleSet:
    """Immutable, normalized reminder rules grouped by category"""

    def __init__(self, rules: Mapping[str, Sequence[DetailedRule]]):
        self._rules: Dict[str, Tuple[DetailedRule, ...]] = {
            category.name: tuple(rules.get(category.name, ())) for category in CATEGORIES
        }

    @classmethod
    def from_mapping(cls, raw_rules: Mapping[str, Optional[Sequence[Any]]]) -> "ReminderRuleSet":
        """Build from ``{setting name: [raw rules]}``, e.g. a settings dump."""
        rules: Dict[str, List[DetailedRule]] = {}
        for category in CATEGORIES:
            entries = raw_rules.get(category.setting) or []
            if not isinstance(entries, (list, tuple)):
                raise ConfigurationError(f"{category.setting}: expected a list of rules")
            rules[category.name] = [
                category.normalize(parse_rule(entry, category, f"{category.setting}[{index}]"))
                for index, entry in enumerate(entries)
            ]
        return cls(rules)

    @classmethod
    def from_settings(cls, settings: Any) -> "ReminderRuleSet":
        return cls.from_mapping({
            category.setting: getattr(settings, category.setting, None) for category in CATEGORIES
        })

    def __iter__(self) -> Iterator[Tuple[ReminderCategory, DetailedRule]]:
        for category in CATEGORIES:
            for rule in self._rules[category.name]:
                yield category, rule

    def __len__(self) -> int:
        return sum(len(rules) for rules in self._rules.values())


@lru_cache(maxsize=1)
def get_rule_set() -> ReminderRuleSet:
    """Rule set parsed from the process settings, loaded once."""
    from ohw_sentinel.core.config import settings

    return ReminderRuleSet.from_settings(settings)
