import sqlite3

import pytest

import db
import onboarding
import texts
from onboarding import (
    OnboardingFSM,
    begin,
    parse_age,
    parse_looking_for,
    step_age,
    step_bio,
    step_gender,
    step_location,
    step_looking_for,
    step_name,
)

STEPS = [step_age, step_name, step_gender, step_bio, step_location, step_looking_for]


async def feed(user_id, state, *answers):
    results = []
    for step, answer in zip(STEPS, answers):
        results.append(await step(user_id, answer, state))
    return results


async def test_full_sequence_creates_user_and_preferences(make_state):
    state = make_state(1)
    await begin(state)

    results = await feed(1, state, "25", "Alex", "Male", "Loves hiking", "Berlin", "Women")

    assert results[-1].completed
    assert results[-1].text == texts.PROFILE_CREATED
    assert not any(r.completed for r in results[:-1])

    user = await db.get_user(1)
    assert {k: user[k] for k in ("age", "name", "gender", "bio", "location")} == {
        "age": 25,
        "name": "Alex",
        "gender": "male",
        "bio": "Loves hiking",
        "location": "Berlin",
    }
    assert user["is_active"] == 1

    prefs = await db.get_preferences(1)
    assert (prefs["looking_for_gender"], prefs["min_age"], prefs["max_age"]) == ("female", 18, 99)

    # после создания анкеты сессии нет
    assert await state.get_state() is None
    assert await state.get_data() == {}


async def test_steps_advance_in_order(make_state):
    state = make_state(1)
    await begin(state)
    assert await state.get_state() == OnboardingFSM.age.state

    expected = [
        OnboardingFSM.name,
        OnboardingFSM.gender,
        OnboardingFSM.bio,
        OnboardingFSM.location,
        OnboardingFSM.looking_for,
    ]
    for step, answer, next_state in zip(STEPS, ["30", "Sam", "other", "Hi", "Paris"], expected):
        await step(1, answer, state)
        assert await state.get_state() == next_state.state


@pytest.mark.parametrize(
    "answer", ["seventeen", "15", "", "17.5", "121", "100000000000000000000"]
)
async def test_invalid_age_reprompts_without_advancing(make_state, answer):
    state = make_state(1)
    await begin(state)

    result = await step_age(1, answer, state)

    assert result.text == texts.ASK_AGE_AGAIN
    assert await state.get_state() == OnboardingFSM.age.state
    assert "age" not in await state.get_data()


async def test_empty_name_reprompts(make_state):
    state = make_state(1)
    await begin(state)
    await step_age(1, "40", state)

    result = await step_name(1, "   ", state)

    assert result.text == texts.ASK_NAME_AGAIN
    assert await state.get_state() == OnboardingFSM.name.state


async def test_gender_is_lower_cased_without_validation(make_state):
    state = make_state(1)
    await begin(state)
    await feed(1, state, "22", "Kim", "NonBinary")

    assert (await state.get_data())["gender"] == "nonbinary"


async def test_begin_restarts_from_age(make_state):
    state = make_state(1)
    await begin(state)
    await feed(1, state, "22", "Kim")

    await begin(state)

    assert await state.get_state() == OnboardingFSM.age.state
    assert await state.get_data() == {}


async def test_failed_write_keeps_session(make_state, monkeypatch):
    async def broken_create_profile(*args, **kwargs):
        raise sqlite3.OperationalError("database is locked")

    state = make_state(1)
    await begin(state)
    await feed(1, state, "25", "Alex", "male", "bio", "Rome")
    monkeypatch.setattr(onboarding, "create_profile", broken_create_profile)

    with pytest.raises(sqlite3.OperationalError):
        await step_looking_for(1, "Men", state)

    assert await state.get_state() == OnboardingFSM.looking_for.state
    assert (await state.get_data())["name"] == "Alex"
    assert await db.get_user(1) is None


def test_parse_age():
    assert parse_age("18") == 18
    assert parse_age(" 44 ") == 44
    assert parse_age("120") == 120
    assert parse_age("17") is None
    assert parse_age("121") is None
    assert parse_age("abc") is None


@pytest.mark.parametrize(
    "text, expected",
    [("Men", "male"), ("men", "male"), ("WOMEN", "female"), ("Both", "both"), ("anyone", "both")],
)
def test_parse_looking_for(text, expected):
    assert parse_looking_for(text) == expected
