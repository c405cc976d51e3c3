from __future__ import annotations

import json
from pathlib import Path

from botocore.exceptions import ClientError
from typer.testing import CliRunner

from scaffoldkit.cli import app


class FakeProvider:
    created: list[tuple[str, str | None, str | None]] = []

    def __init__(self, config=None):  # type: ignore[no-untyped-def]
        self.config = config

    async def list_profiles(self) -> list[str]:
        return ["default", "dev"]

    async def list_regions(self, profile: str | None) -> list[str]:
        return ["us-east-1", "eu-west-1"]

    async def check_bucket_exists(self, bucket: str, profile: str | None) -> bool:
        return False

    async def create_bucket(self, bucket: str, profile: str | None, region: str | None = None) -> dict[str, str]:
        FakeProvider.created.append((bucket, profile, region))
        return {"location": f"/{bucket}"}


class RejectingProvider(FakeProvider):
    async def create_bucket(self, bucket: str, profile: str | None, region: str | None = None) -> dict[str, str]:
        raise ClientError({"Error": {"Code": "BucketAlreadyOwnedByYou", "Message": "owned"}}, "CreateBucket")


def _stored(tmp_path: Path) -> dict[str, object]:
    return json.loads((tmp_path / ".scaffoldkit.json").read_text(encoding="utf-8"))["scaffoldkit"]


def test_init_writes_config_and_refuses_to_overwrite(tmp_path: Path) -> None:
    target = tmp_path / "scaffoldkit.toml"
    runner = CliRunner()

    first = runner.invoke(app, ["init", "--path", str(target)])
    second = runner.invoke(app, ["init", "--path", str(target)])

    assert first.exit_code == 0
    assert "Initialized" in first.output
    assert "[store]" in target.read_text(encoding="utf-8")
    assert second.exit_code != 0


def test_resolve_lambda_from_answers_file(monkeypatch, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.chdir(tmp_path)
    answers = tmp_path / "answers.json"
    answers.write_text(json.dumps({"project_name": "sample-svc", "lambda_function_name": "resizeImage"}), encoding="utf-8")

    result = CliRunner().invoke(app, ["resolve", "--type", "lambda", "--answers", str(answers)])

    assert result.exit_code == 0
    assert "Questions asked: 12" in result.output
    stored = _stored(tmp_path)
    assert stored["_project_type"] == "lambda"
    assert stored["project_prefix"] == "ss0"
    assert "lambda_function_name" not in stored
    assert (tmp_path / ".scaffoldkit" / "logs" / "resolution_events.jsonl").exists()


def test_resolve_lambda_interactively(monkeypatch, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(
        app,
        ["resolve", "--type", "lambda"],
        input="\n".join(["", "widget", "", "", "", "", "", "", "", "", "", ""]) + "\n",
    )

    assert result.exit_code == 0
    stored = _stored(tmp_path)
    assert stored["project_name"] == "widget"
    assert stored["project_prefix"] == "w00"
    assert stored["project_version"] == "0.0.1"


def test_resolve_microservice_creates_confirmed_bucket(monkeypatch, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("scaffoldkit.cli.AwsProvider", FakeProvider)
    FakeProvider.created = []
    answers = tmp_path / "answers.json"
    answers.write_text(
        json.dumps(
            {
                "project_name": "svc",
                "aws_profile": "dev",
                "aws_region": "eu-west-1",
                "aws_s3_bucket": "new-bucket",
            }
        ),
        encoding="utf-8",
    )

    result = CliRunner().invoke(app, ["resolve", "--answers", str(answers)])

    assert result.exit_code == 0
    assert "Creating S3 bucket: new-bucket" in result.output
    assert "S3 bucket created: /new-bucket" in result.output
    assert FakeProvider.created == [("new-bucket", "dev", "eu-west-1")]
    stored = _stored(tmp_path)
    assert stored["_project_type"] == "microservice"
    assert stored["aws_region"] == "eu-west-1"
    assert stored["aws_s3_bucket_create"] is True


def test_second_resolve_reuses_stored_confirmation_without_recreating_bucket(monkeypatch, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("scaffoldkit.cli.AwsProvider", FakeProvider)
    FakeProvider.created = []
    first_answers = tmp_path / "first.json"
    first_answers.write_text(
        json.dumps({"project_name": "svc", "aws_profile": "dev", "aws_region": "us-east-1", "aws_s3_bucket": "b1"}),
        encoding="utf-8",
    )
    no_answers = tmp_path / "none.json"
    no_answers.write_text("{}", encoding="utf-8")
    runner = CliRunner()

    first = runner.invoke(app, ["resolve", "--answers", str(first_answers)])
    second = runner.invoke(app, ["resolve", "--answers", str(no_answers)])

    assert first.exit_code == 0
    assert second.exit_code == 0
    assert "Questions asked: 0" in second.output
    assert "Creating S3 bucket" not in second.output
    assert FakeProvider.created == [("b1", "dev", "us-east-1")]
    assert _stored(tmp_path)["aws_s3_bucket_create"] is True


def test_bucket_creation_failure_is_reported_without_failing_the_run(monkeypatch, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("scaffoldkit.cli.AwsProvider", RejectingProvider)
    answers = tmp_path / "answers.json"
    answers.write_text(json.dumps({"aws_profile": "dev", "aws_region": "us-east-1", "aws_s3_bucket": "taken"}), encoding="utf-8")

    result = CliRunner().invoke(app, ["resolve", "--answers", str(answers)])

    assert result.exit_code == 0
    assert "Error creating S3 bucket (taken)" in result.output
    assert _stored(tmp_path)["aws_s3_bucket"] == "taken"


def test_resolve_microservice_can_skip_bucket_creation(monkeypatch, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("scaffoldkit.cli.AwsProvider", FakeProvider)
    FakeProvider.created = []
    answers = tmp_path / "answers.json"
    answers.write_text(json.dumps({"aws_profile": "dev", "aws_region": "us-east-1", "aws_s3_bucket": "new-bucket"}), encoding="utf-8")

    result = CliRunner().invoke(app, ["resolve", "--answers", str(answers), "--no-create-bucket"])

    assert result.exit_code == 0
    assert "Creating S3 bucket" not in result.output
    assert FakeProvider.created == []


def test_show_lists_stored_values(monkeypatch, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    empty = runner.invoke(app, ["show"])
    (tmp_path / ".scaffoldkit.json").write_text(json.dumps({"scaffoldkit": {"project_name": "widget"}}), encoding="utf-8")
    listed = runner.invoke(app, ["show"])

    assert empty.exit_code == 0
    assert "No stored values in .scaffoldkit.json" in empty.output
    assert listed.exit_code == 0
    assert "project_name" in listed.output
    assert "widget" in listed.output


def test_invalid_config_is_reported_as_bad_parameter(monkeypatch, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.chdir(tmp_path)
    (tmp_path / "scaffoldkit.toml").write_text('[run]\nproject_type = "desktop"\n', encoding="utf-8")

    result = CliRunner().invoke(app, ["resolve"])

    assert result.exit_code == 2


def test_unknown_project_type_option_is_rejected(monkeypatch, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(app, ["resolve", "--type", "desktop"])

    assert result.exit_code == 2


def test_malformed_answers_file_is_reported_as_bad_parameter(monkeypatch, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.chdir(tmp_path)
    answers = tmp_path / "answers.json"
    answers.write_text('{"project_name": ', encoding="utf-8")

    result = CliRunner().invoke(app, ["resolve", "--type", "lambda", "--answers", "answers.json"])

    assert result.exit_code == 2
    assert "is not valid JSON" in result.output


def test_corrupt_store_is_reported_as_bad_parameter(monkeypatch, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".scaffoldkit.json").write_text("{not json", encoding="utf-8")

    result = CliRunner().invoke(app, ["show"])

    assert result.exit_code == 2
    assert "is not valid JSON" in result.output
