from __future__ import annotations

import os
import tomllib
from pathlib import Path

from scaffoldkit.config.models import ScaffoldConfig
from scaffoldkit.constants import DEFAULT_CONFIG_FILE


def load_config(config_path: str | Path | None = None) -> ScaffoldConfig:
    path = Path(config_path or DEFAULT_CONFIG_FILE)
    if path.exists():
        raw = tomllib.loads(path.read_text(encoding="utf-8"))
        cfg = ScaffoldConfig.model_validate(raw)
    else:
        cfg = ScaffoldConfig()

    env_store = os.getenv("SCAFFOLDKIT_STORE_PATH")
    if env_store:
        cfg.store.path = env_store

    env_region = os.getenv("SCAFFOLDKIT_LOOKUP_REGION")
    if env_region:
        cfg.aws.lookup_region = env_region

    return cfg


def scaffold_default_config(target: Path) -> None:
    target.write_text(
        """[store]
path = ".scaffoldkit.json"
namespace = "scaffoldkit"

[aws]
lookup_region = "us-east-1"

[run]
logs_dir = ".scaffoldkit/logs"
audit_enabled = true
project_type = "microservice"

[defaults]
project_version = "0.0.1"
project_description = "My AWS microservice"
lambda_function_name = "hello_world"
lambda_function_description = "sample lambda function"
lambda_memory = 128
lambda_timeout = 3
""",
        encoding="utf-8",
    )
