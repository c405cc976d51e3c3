from __future__ import annotations

from scaffoldkit.constants import CUSTOM_PROFILE_CHOICE
from scaffoldkit.intake.fields import Domain, FieldSpec
from scaffoldkit.intake.overrides import apply_overrides, has_override, resolve_override


def test_non_empty_override_wins() -> None:
    answers = {"aws_profile": CUSTOM_PROFILE_CHOICE, "aws_profile_custom": "ops"}

    assert resolve_override("aws_profile", "aws_profile_custom", answers) == "ops"


def test_empty_or_missing_override_keeps_base_value() -> None:
    assert resolve_override("aws_profile", "aws_profile_custom", {"aws_profile": "dev", "aws_profile_custom": ""}) == "dev"
    assert resolve_override("aws_profile", "aws_profile_custom", {"aws_profile": "dev", "aws_profile_custom": None}) == "dev"
    assert resolve_override("aws_profile", "aws_profile_custom", {"aws_profile": "dev"}) == "dev"


def test_only_non_empty_strings_count_as_overrides() -> None:
    assert has_override("ops")
    assert has_override(" ")
    assert not has_override("")
    assert not has_override(None)
    assert not has_override(0)


def test_apply_overrides_folds_and_drops_override_fields() -> None:
    domain = Domain(
        "deployment",
        (
            FieldSpec("aws_profile", "Profile?", kind="select"),
            FieldSpec("aws_profile_custom", "Custom?", override_of="aws_profile"),
            FieldSpec("aws_region", "Region?", kind="select"),
            FieldSpec("aws_region_custom", "Custom region?", override_of="aws_region"),
            FieldSpec("aws_s3_bucket", "Bucket?"),
        ),
    )
    answers = {
        "aws_profile": CUSTOM_PROFILE_CHOICE,
        "aws_profile_custom": "ops",
        "aws_region": "us-east-1",
        "aws_region_custom": None,
        "aws_s3_bucket": "deploy",
    }

    final = apply_overrides(domain, answers)

    assert final == {"aws_profile": "ops", "aws_region": "us-east-1", "aws_s3_bucket": "deploy"}
    assert answers["aws_profile_custom"] == "ops"
