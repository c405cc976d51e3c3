from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from scaffoldkit.constants import DEFAULT_STORE_FILE, GENERATOR_NAME


class StoreConfig(BaseModel):
    path: str = Field(default=DEFAULT_STORE_FILE, description="JSON file holding previously resolved values.")
    namespace: str = Field(default=GENERATOR_NAME, description="Top-level key the values are grouped under.")

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("store namespace must not be empty")
        return value


class AwsConfig(BaseModel):
    lookup_region: str = Field(
        default="us-east-1",
        description="Region the EC2 client is bound to when enumerating regions.",
    )


class RunConfig(BaseModel):
    logs_dir: str = ".scaffoldkit/logs"
    audit_enabled: bool = True
    project_type: Literal["microservice", "lambda"] = "microservice"


class DefaultsConfig(BaseModel):
    project_version: str = "0.0.1"
    project_description: str = "My AWS microservice"
    lambda_function_name: str = "hello_world"
    lambda_function_description: str = "sample lambda function"
    lambda_memory: int = Field(default=128, gt=0)
    lambda_timeout: int = Field(default=3, gt=0)


class ScaffoldConfig(BaseModel):
    store: StoreConfig = Field(default_factory=StoreConfig)
    aws: AwsConfig = Field(default_factory=AwsConfig)
    run: RunConfig = Field(default_factory=RunConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
