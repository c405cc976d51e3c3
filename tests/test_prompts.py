from __future__ import annotations

import pytest

from scaffoldkit.ui.prompts import LinePrompter, Question, ScriptedPrompter, ScriptExhaustedError


def test_line_prompter_renders_choices_default_and_error() -> None:
    prompts: list[str] = []

    def prompt_fn(message: str) -> str:
        prompts.append(message)
        return ""

    question = Question(
        kind="select",
        name="aws_profile",
        message="AWS profile?",
        choices=["default", "dev", "-- type in a profile --"],
        default_index=1,
        error="Please pick one of the listed choices",
    )

    answer = LinePrompter(prompt_fn).ask(question)

    assert answer == "dev"
    assert prompts == [
        ">> Please pick one of the listed choices\n"
        "  1) default\n"
        "* 2) dev\n"
        "  3) -- type in a profile --\n"
        "AWS profile? [dev]: "
    ]


def test_line_prompter_parses_select_by_number_or_text() -> None:
    prompter = LinePrompter(lambda _message: "")
    question = Question(kind="select", name="aws_region", message="Region?", choices=["us-east-1", "eu-west-1"], default_index=0)

    assert prompter.parse(question, "2") == "eu-west-1"
    assert prompter.parse(question, "us-east-1") == "us-east-1"
    assert prompter.parse(question, "9") == "9"


def test_line_prompter_parses_confirm_tokens() -> None:
    prompter = LinePrompter(lambda _message: "")
    question = Question(kind="confirm", name="create", message="Create?", default=True)

    assert prompter.parse(question, "") is True
    assert prompter.parse(question, "No") is False
    assert prompter.parse(question, "y") is True
    assert prompter.parse(question, "perhaps") == "perhaps"
    assert prompter.render(question) == "Create? [yes]: "


def test_line_prompter_strips_input_and_keeps_text_default() -> None:
    prompter = LinePrompter(lambda _message: "   ")
    question = Question(kind="input", name="project_version", message="Project version?", default="0.0.1")

    assert prompter.ask(question) == "0.0.1"
    assert prompter.render(question) == "Project version? [0.0.1]: "


def test_scripted_prompter_replays_attempts_and_falls_back_to_defaults() -> None:
    prompter = ScriptedPrompter({"project_version": ("bad", "1.0.0")})
    version = Question(kind="input", name="project_version", message="Version?", default="0.0.1")
    name = Question(kind="input", name="project_name", message="Name?", default="widget")

    assert prompter.ask(version) == "bad"
    assert prompter.ask(version) == "1.0.0"
    assert prompter.ask(name) == "widget"
    assert prompter.asked_names == ["project_version", "project_version", "project_name"]

    with pytest.raises(ScriptExhaustedError, match="No scripted answer left for 'project_version'"):
        prompter.ask(version)


def test_scripted_prompter_refuses_to_repeat_a_rejected_default() -> None:
    prompter = ScriptedPrompter({})
    question = Question(kind="input", name="aws_region_custom", message="Region?", error="Please enter a non empty value")

    with pytest.raises(ScriptExhaustedError, match="Default for 'aws_region_custom' was rejected"):
        prompter.ask(question)
