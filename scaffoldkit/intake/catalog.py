from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import semver

from scaffoldkit.config.models import DefaultsConfig
from scaffoldkit.constants import CUSTOM_PROFILE_CHOICE, CUSTOM_REGION_CHOICE, NOT_AVAILABLE
from scaffoldkit.intake.fields import Answers, Domain, FieldSpec
from scaffoldkit.intake.overrides import has_override
from scaffoldkit.lookups.aws import DeploymentLookups

PROJECT_DOMAIN = "project"
AUTHOR_DOMAIN = "author"
DEPLOYMENT_DOMAIN = "deployment"
LAMBDA_DOMAIN = "lambda"

PREFIX_LENGTH = 3


def derive_prefix(project_name: str) -> str:
    """First letter of each hyphen-separated token, padded with ``0`` to three."""
    letters = [token[:1] for token in project_name.split("-")]
    while len(letters) < PREFIX_LENGTH:
        letters.append("0")
    return "".join(letters[:PREFIX_LENGTH])


def split_keywords(answer: Any) -> list[str]:
    if isinstance(answer, (list, tuple)):
        return list(answer)
    return [keyword.strip() for keyword in str(answer).split(",") if keyword.strip()]


def camel_case(value: str) -> str:
    parts = [part.lower() if part.isupper() else part for part in re.split(r"[\s_\-.]+", value) if part]
    if not parts:
        return ""
    head = parts[0][:1].lower() + parts[0][1:]
    return head + "".join(part[:1].upper() + part[1:] for part in parts[1:])


def decamelize(value: str) -> str:
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", value).lower()


def validate_namespace(answer: Any) -> bool | str:
    if answer != "" and not str(answer).startswith("@"):
        return 'Namespaces must start with a "@"'
    return True


def validate_semver(answer: Any) -> bool | str:
    if not isinstance(answer, str) or not semver.Version.is_valid(answer):
        return "Please enter a SemVer compatible version string"
    return True


def validate_non_empty(answer: Any) -> bool | str:
    if not isinstance(answer, str) or len(answer) < 1:
        return "Please enter a non empty value"
    return True


def validate_positive_int(answer: Any) -> bool | str:
    if isinstance(answer, bool):
        return "Please enter a positive whole number"
    if isinstance(answer, int) and answer > 0:
        return True
    if isinstance(answer, str) and answer.strip().isdigit() and int(answer) > 0:
        return True
    return "Please enter a positive whole number"


def build_project_domain(defaults: DefaultsConfig | None = None, app_name: str | None = None) -> Domain:
    defaults = defaults or DefaultsConfig()
    app_name = app_name or Path.cwd().name

    return Domain(
        PROJECT_DOMAIN,
        (
            FieldSpec(
                "project_namespace",
                "Project namespace (leave empty if none)?",
                default=lambda _answers, stored: stored or "",
                validate=validate_namespace,
            ),
            FieldSpec(
                "project_name",
                "Project name?",
                default=lambda _answers, stored: re.sub(r"\s", "-", stored or app_name),
                validate=validate_non_empty,
            ),
            FieldSpec(
                "project_version",
                "Project version?",
                default=lambda _answers, stored: stored or defaults.project_version,
                validate=validate_semver,
            ),
            FieldSpec(
                "project_prefix",
                "Project prefix?",
                default=lambda answers, _stored: derive_prefix(str(answers.get("project_name") or "")),
            ),
            FieldSpec(
                "project_description",
                "Project description?",
                default=lambda _answers, stored: stored or defaults.project_description,
            ),
            FieldSpec(
                "project_keywords",
                "Project keywords (comma separated)?",
                default=lambda _answers, stored: stored or [],
                transform=split_keywords,
            ),
        ),
    )


def _default_git_username(answers: Answers, stored: Any) -> str:
    if stored:
        return stored
    namespace = answers.get("project_namespace")
    if isinstance(namespace, str) and namespace:
        return namespace[1:]
    return NOT_AVAILABLE


def build_author_domain() -> Domain:
    return Domain(
        AUTHOR_DOMAIN,
        (
            FieldSpec(
                "author_name",
                "Author name?",
                default=lambda _answers, stored: stored or NOT_AVAILABLE,
            ),
            FieldSpec(
                "author_email",
                "Author email?",
                default=lambda _answers, stored: stored or NOT_AVAILABLE,
            ),
            FieldSpec("git_username", "Git username?", default=_default_git_username),
            FieldSpec(
                "git_url",
                "Git URL?",
                default=lambda answers, stored: stored
                or f"github.com/{answers.get('git_username')}/{answers.get('project_name', '')}",
            ),
            FieldSpec(
                "git_documentation_url",
                "Documentation URL?",
                default=lambda answers, stored: stored
                or f"https://{answers.get('git_username')}.github.io/{answers.get('project_name', '')}",
            ),
        ),
    )


def build_deployment_domain(lookups: DeploymentLookups) -> Domain:
    def custom_profile_typed(answers: Answers) -> bool:
        return has_override(answers.get("aws_profile_custom"))

    async def bucket_missing(answers: Answers) -> bool:
        if custom_profile_typed(answers):
            return False
        exists = await lookups.bucket_exists(str(answers.get("aws_s3_bucket")), answers.get("aws_profile"))
        return not exists

    return Domain(
        DEPLOYMENT_DOMAIN,
        (
            FieldSpec(
                "aws_profile",
                "AWS profile?",
                kind="select",
                choices=lambda _answers: lookups.profiles(CUSTOM_PROFILE_CHOICE),
            ),
            FieldSpec(
                "aws_profile_custom",
                "Enter AWS profile name",
                override_of="aws_profile",
                visible=lambda answers: answers.get("aws_profile") == CUSTOM_PROFILE_CHOICE,
                validate=validate_non_empty,
            ),
            FieldSpec(
                "aws_region",
                "AWS region?",
                kind="select",
                visible=lambda answers: not custom_profile_typed(answers),
                choices=lambda answers: lookups.regions(answers.get("aws_profile"), CUSTOM_REGION_CHOICE),
            ),
            FieldSpec(
                "aws_region_custom",
                "Enter AWS region name",
                override_of="aws_region",
                visible=lambda answers: custom_profile_typed(answers)
                or answers.get("aws_region") == CUSTOM_REGION_CHOICE,
                validate=validate_non_empty,
            ),
            FieldSpec(
                "aws_s3_bucket",
                "AWS S3 bucket for deployment files?",
                validate=validate_non_empty,
            ),
            FieldSpec(
                "aws_s3_bucket_create",
                "Bucket does not exist. Create?",
                kind="confirm",
                bound_to="aws_s3_bucket",
                default=lambda _answers, _stored: True,
                visible=bucket_missing,
                hidden_default=lambda _answers, _stored: False,
            ),
        ),
    )


def build_lambda_domain(defaults: DefaultsConfig | None = None) -> Domain:
    defaults = defaults or DefaultsConfig()

    return Domain(
        LAMBDA_DOMAIN,
        (
            FieldSpec(
                "lambda_function_name",
                "Lambda function name?",
                default=lambda _answers, _stored: defaults.lambda_function_name,
                validate=validate_non_empty,
            ),
            FieldSpec(
                "lambda_handler_name",
                "Lambda handler name?",
                default=lambda answers, _stored: f"index.{camel_case(str(answers.get('lambda_function_name', '')))}Handler",
            ),
            FieldSpec(
                "lambda_function_description",
                "Lambda function description?",
                default=lambda _answers, _stored: defaults.lambda_function_description,
            ),
            FieldSpec(
                "lambda_memory",
                "Memory allocation?",
                default=lambda _answers, _stored: defaults.lambda_memory,
                validate=validate_positive_int,
                transform=int,
            ),
            FieldSpec(
                "lambda_timeout",
                "Lambda timeout?",
                default=lambda _answers, _stored: defaults.lambda_timeout,
                validate=validate_positive_int,
                transform=int,
            ),
            FieldSpec(
                "lambda_schema_create",
                "Does the function require schema validation?",
                kind="confirm",
                default=lambda _answers, _stored: True,
            ),
        ),
        persist=False,
    )


def build_microservice_domains(
    lookups: DeploymentLookups,
    defaults: DefaultsConfig | None = None,
    app_name: str | None = None,
) -> tuple[Domain, ...]:
    return (
        build_project_domain(defaults, app_name),
        build_author_domain(),
        build_deployment_domain(lookups),
    )


def build_lambda_domains(defaults: DefaultsConfig | None = None, app_name: str | None = None) -> tuple[Domain, ...]:
    return (
        build_project_domain(defaults, app_name),
        build_lambda_domain(defaults),
    )
