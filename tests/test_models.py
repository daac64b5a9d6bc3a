import pytest
from pydantic import ValidationError

from app.base.models import DayOfWeek, InterviewerConfig, default_interviewer_config


def config_payload(max_per_week=3, rules=None):
    return {"maxInterviewsPerWeek": max_per_week, "rules": rules if rules is not None else []}


def test_camel_case_round_trip():
    config = InterviewerConfig.model_validate(config_payload(rules=[
        {"dayOfWeek": 1, "timeRanges": [{"start": "09:00", "end": "10:00"}, {"start": "10:00", "end": "11:00"}]},
    ]))
    assert config.rules[0].day_of_week is DayOfWeek.MONDAY
    dumped = config.model_dump(mode="json", by_alias=True)
    assert dumped == config_payload(rules=[
        {"dayOfWeek": 1, "timeRanges": [{"start": "09:00", "end": "10:00"}, {"start": "10:00", "end": "11:00"}]},
    ])


def test_snake_case_names_also_accepted():
    config = InterviewerConfig(max_interviews_per_week=2, rules=[])
    assert config.max_interviews_per_week == 2


@pytest.mark.parametrize("rules", [
    [{"dayOfWeek": 1, "timeRanges": [{"start": "09:00", "end": "11:00"}, {"start": "10:30", "end": "12:00"}]}],
    [{"dayOfWeek": 1, "timeRanges": [{"start": "10:00", "end": "10:00"}]}],
    [{"dayOfWeek": 1, "timeRanges": [{"start": "12:00", "end": "09:00"}]}],
    [{"dayOfWeek": 1, "timeRanges": [{"start": "9am", "end": "10:00"}]}],
    [{"dayOfWeek": 7, "timeRanges": []}],
    [{"dayOfWeek": 2, "timeRanges": []}, {"dayOfWeek": 2, "timeRanges": []}],
])
def test_invalid_rules_rejected(rules):
    with pytest.raises(ValidationError):
        InterviewerConfig.model_validate(config_payload(rules=rules))


@pytest.mark.parametrize("max_per_week", [0, -1])
def test_weekly_cap_must_be_positive(max_per_week):
    with pytest.raises(ValidationError):
        InterviewerConfig.model_validate(config_payload(max_per_week=max_per_week))


def test_default_config():
    config = default_interviewer_config()
    assert config.max_interviews_per_week == 5
    assert config.rule_for(DayOfWeek.MONDAY).time_ranges[0].start == "09:00"
    assert config.rule_for(DayOfWeek.WEDNESDAY).time_ranges[0].end == "17:00"
    assert config.rule_for(DayOfWeek.FRIDAY) is None
