"""Tests for the thirteen category extractors."""

import pytest

from contextcore import (
    extract_constraints,
    extract_events,
    extract_experiences,
    extract_facts,
    extract_goals,
    extract_identity,
    extract_intents,
    extract_jobs,
    extract_preferences,
    extract_results,
    extract_skills,
    extract_tools,
    extract_warnings,
)
from contextcore.types import Temporal


class TestIdentity:

    def test_explicit_name(self):
        items = extract_identity("My name is Alice.")
        assert len(items) == 1
        assert items[0].type == "name"
        assert items[0].value == "Alice"
        assert items[0].subtype == "explicit"
        assert items[0].confidence == pytest.approx(0.90)

    def test_age(self):
        items = extract_identity("I'm 25 years old")
        assert [(i.type, i.value) for i in items] == [("age", 25)]
        assert items[0].confidence == pytest.approx(0.95)

    def test_role(self):
        items = extract_identity("I am a software engineer")
        assert ("role", "software engineer") in [(i.type, i.value) for i in items]

    def test_alias(self):
        items = extract_identity("Call me Sam")
        assert [(i.type, i.value) for i in items] == [("alias", "Sam")]

    def test_not_a_name(self):
        assert extract_identity("My name is confidential") == []


class TestGoals:

    def test_desire(self):
        goals = extract_goals("I want to migrate my workflow to Linux.")
        assert len(goals) == 1
        goal = goals[0]
        assert goal.description == "migrate workflow to linux"
        assert goal.category == "technical"
        assert goal.status == "active"
        assert goal.subtype == "desire"
        assert goal.confidence == pytest.approx(0.85)

    def test_conjoined_goals_split(self):
        goals = extract_goals("I want to clean up my desk and set up a new monitor")
        assert [g.description for g in goals] == ["clean up desk", "set up new monitor"]
        assert all(g.horizon == "short" for g in goals)

    def test_explicit_goal(self):
        goals = extract_goals("My goal is to run a marathon")
        assert goals[0].description == "run marathon"
        assert goals[0].category == "health"
        assert goals[0].confidence == pytest.approx(0.95)

    def test_long_horizon(self):
        goals = extract_goals("Someday I want to learn Rust")
        assert [g.description for g in goals] == ["learn rust"]
        assert goals[0].horizon == "long"
        assert goals[0].category == "education"

    def test_paused(self):
        goals = extract_goals("I want to learn Rust but it's on hold")
        assert goals[0].description == "learn rust"
        assert goals[0].status == "paused"

    def test_questions_are_not_goals(self):
        assert extract_goals("Do I want to learn Rust?") == []

    def test_vague_goal_rejected(self):
        assert extract_goals("I want to be better") == []

    def test_predicted_loss_is_not_a_goal(self):
        assert extract_goals("I'll lose my job if this fails") == []

    def test_worry_is_not_a_goal(self):
        assert extract_goals("I am worried I will break my setup") == []

    def test_loss_as_desire_is_kept(self):
        assert [g.description for g in extract_goals("I want to lose weight")] == ["lose weight"]


class TestEvents:

    def test_known_event_with_temporal(self):
        events = extract_events("The internet went down just now")
        assert len(events) == 1
        assert events[0].name == "internet_outage"
        assert events[0].temporal == Temporal(tense="past", decay="short")
        assert events[0].confidence == pytest.approx(0.90)

    def test_travel_mode(self):
        events = extract_events("I'm on a train to Berlin")
        assert events[0].name == "travel"
        assert events[0].details == {"mode": "train"}
        assert events[0].temporal == Temporal(tense="present", decay="short")

    def test_general_fallback(self):
        events = extract_events("We have a conference tomorrow")
        assert [e.name for e in events] == ["work_event"]
        assert events[0].temporal.tense == "future"
        assert events[0].confidence == pytest.approx(0.75)


class TestTools:

    def test_usage(self):
        tools = extract_tools("I'm using VS Code on Windows")
        assert [(t.type, t.name, t.context) for t in tools] == [
            ("software", "vscode", "in_use"),
            ("software", "windows", "in_use"),
        ]

    def test_planned(self):
        tools = extract_tools("I'm planning to switch to Linux")
        assert [(t.name, t.context) for t in tools] == [("linux", "planned")]

    def test_learning_mention_belongs_to_skills(self):
        assert extract_tools("I want to learn Docker") == []

    def test_skill_phrase_is_not_a_tool(self):
        assert extract_tools("I do web development") == []


class TestSkills:

    def test_listing(self):
        skills = extract_skills("I know Python and JavaScript.")
        assert [(s.type, s.name) for s in skills] == [
            ("technical", "python"),
            ("technical", "javascript"),
        ]
        assert all(s.confidence == pytest.approx(0.90) for s in skills)

    def test_language_level(self):
        skills = extract_skills("I'm fluent in Spanish")
        assert [(s.type, s.name, s.level) for s in skills] == [("language", "spanish", "advanced")]

    def test_learning_goal_is_not_a_skill(self):
        assert extract_skills("I want to learn Rust") == []


class TestJobs:

    def test_building(self):
        jobs = extract_jobs("I'm building an ESP32 sensor project")
        assert len(jobs) == 1
        assert jobs[0].title == "esp32 sensor project"
        assert jobs[0].status == "active"
        assert jobs[0].domain == "hardware"
        assert jobs[0].confidence == pytest.approx(0.96)

    def test_paused(self):
        jobs = extract_jobs("We shelved the chess app.")
        assert [(j.title, j.status, j.domain) for j in jobs] == [("chess app", "paused", "software")]

    def test_vague_title_rejected(self):
        assert extract_jobs("We are building it") == []


class TestPreferences:

    def test_comparison(self):
        prefs = extract_preferences("I prefer dark mode over light mode")
        assert len(prefs) == 1
        pref = prefs[0]
        assert pref.key == "mode"
        assert pref.value == "dark mode"
        assert pref.polarity == "positive"
        assert pref.comparison == "light mode"
        assert pref.confidence == pytest.approx(0.95)

    def test_dislike(self):
        prefs = extract_preferences("I hate light themes")
        assert [(p.key, p.value, p.polarity) for p in prefs] == [("mode", "light themes", "negative")]

    def test_favorite(self):
        prefs = extract_preferences("My favorite editor is Neovim")
        assert [(p.key, p.value) for p in prefs] == [("editor", "neovim")]

    def test_want_is_not_a_preference(self):
        assert extract_preferences("I want a new laptop") == []


class TestExperiences:

    def test_worked_with(self):
        items = extract_experiences("I've worked with distributed systems before")
        assert [e.description for e in items] == ["worked with distributed systems"]
        assert items[0].confidence == pytest.approx(0.90)

    def test_built_before(self):
        items = extract_experiences("I have built similar systems before")
        assert [e.description for e in items] == ["built similar systems previously"]


class TestFacts:

    def test_storage_facts(self):
        facts = extract_facts("My files are all backed up to the cloud.")
        pairs = {(f.key, f.value) for f in facts}
        assert ("data_storage", "cloud_backed") in pairs
        assert ("data_backup_status", "complete") in pairs

    def test_location(self):
        facts = extract_facts("I live in Berlin.")
        assert [(f.key, f.value) for f in facts] == [("location", "berlin")]

    def test_typed_value(self):
        facts = extract_facts("My age is 30")
        assert [(f.key, f.value) for f in facts] == [("age", 30)]

    def test_opinions_are_not_facts(self):
        assert extract_facts("My code is terrible") == []

    def test_questions_are_not_facts(self):
        assert extract_facts("My laptop is broken?") == []


class TestResults:

    def test_passive_outcome(self):
        results = extract_results("After resetting my PC, all local files were wiped.")
        assert [(r.outcome, r.source) for r in results] == [("local files wiped", "system_reset")]
        assert results[0].confidence == pytest.approx(0.90)

    def test_status(self):
        results = extract_results("The deployment failed")
        assert [(r.outcome, r.source) for r in results] == [("failed", "deployment")]

    def test_user_action(self):
        results = extract_results("I passed the exam")
        assert [(r.outcome, r.source) for r in results] == [("passed exam", "user action")]

    def test_causal(self):
        results = extract_results("The update caused a boot loop")
        assert [(r.outcome, r.source) for r in results] == [("boot loop", "system_upgrade")]
        assert results[0].confidence == pytest.approx(0.90)

    def test_destructive_maps_subject_to_event(self):
        results = extract_results("The power outage corrupted my database")
        assert [(r.outcome, r.source) for r in results] == [("corrupted database", "system_failure")]

    @pytest.mark.parametrize("text, expected", [
        ("Resetting my PC deleted all my files", ("deleted files", "system_reset")),
        ("Updating the OS broke my drivers", ("broke drivers", "system_upgrade")),
    ])
    def test_destructive_gerund_subject(self, text, expected):
        results = extract_results(text)
        assert [(r.outcome, r.source) for r in results] == [expected]

    def test_status_gerund_subject(self):
        results = extract_results("Updating the OS failed")
        assert [(r.outcome, r.source) for r in results] == [("failed", "system_upgrade")]

    def test_trigger(self):
        results = extract_results("It crashed when the power outage happened")
        assert [(r.outcome, r.source) for r in results] == [("happened", "system_failure")]
        assert results[0].confidence == pytest.approx(0.80)


class TestIntents:

    def test_question_is_ask(self):
        intents = extract_intents("How do I fix this error?")
        assert len(intents) == 1
        assert intents[0].type == "ask"
        assert intents[0].confidence == pytest.approx(0.90)

    def test_choice_question_is_decide(self):
        intents = extract_intents("Should I use Vim or Emacs?")
        assert [i.type for i in intents] == ["decide"]

    def test_keyword_debug(self):
        intents = extract_intents("I'm debugging a crash in my app")
        assert [(i.type, i.confidence) for i in intents] == [("debug", pytest.approx(0.85))]

    def test_help_request_target(self):
        intents = extract_intents("Can you help me back up my passwords?")
        assert [(i.type, i.target) for i in intents] == [("ask", "backup_method")]
        assert intents[0].confidence == pytest.approx(0.95)

    def test_sensor_request(self):
        intents = extract_intents("Which sensor should I use for humidity?")
        assert [(i.type, i.target) for i in intents] == [("ask", "sensor_recommendation")]

    def test_editor_name_is_not_a_comparison(self):
        assert extract_intents("I use VS Code on Windows 11") == []

    def test_versus_statement_is_decide(self):
        intents = extract_intents("Python vs Go for my backend")
        assert [i.type for i in intents] == ["decide"]


class TestConstraints:

    def test_on_mobile(self):
        items = extract_constraints("I'm on mobile right now")
        assert [(c.type, c.description) for c in items] == [("device_limitation", "only mobile available")]

    def test_stuck_environment(self):
        items = extract_constraints("I'm stuck using Windows on my laptop")
        assert [(c.type, c.description) for c in items] == [
            ("environment_limitation", "currently restricted to windows laptop"),
        ]

    def test_hardware_failure(self):
        items = extract_constraints("My laptop stopped booting")
        assert [(c.type, c.description) for c in items] == [("hardware_failure", "laptop not booting")]

    def test_only_mobile(self):
        items = extract_constraints("I only have my phone with me")
        assert [(c.type, c.description) for c in items] == [("device_limitation", "only mobile available")]


class TestWarnings:

    def test_reset_without_losing(self):
        items = extract_warnings("I want to reset my PC without losing my files")
        assert [(w.type, w.related_to) for w in items] == [("data_loss_risk", "pc_reset")]
        assert items[0].confidence == pytest.approx(0.90)

    def test_breakage(self):
        items = extract_warnings("Resetting Windows might break my development setup")
        assert [(w.type, w.related_to) for w in items] == [
            ("system_breakage_risk", "windows_reset"),
            ("data_loss_risk", "pc_reset"),
        ]

    def test_security_question(self):
        items = extract_warnings("Is it safe to use public wifi?")
        assert [(w.type, w.related_to) for w in items] == [("security_risk", None)]

    def test_neutral_text(self):
        assert extract_warnings("Hello world.") == []
