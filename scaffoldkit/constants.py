from __future__ import annotations

GENERATOR_NAME = "scaffoldkit"
DEFAULT_CONFIG_FILE = "scaffoldkit.toml"
DEFAULT_STORE_FILE = ".scaffoldkit.json"

CUSTOM_PROFILE_CHOICE = "-- type in a profile --"
CUSTOM_REGION_CHOICE = "-- type in a region --"

PROJECT_TYPE_KEY = "_project_type"
PROJECT_TYPES = ("microservice", "lambda")

NOT_AVAILABLE = "__NA__"
