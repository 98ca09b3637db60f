# airnope/config/models/core.py
from typing import List

from pydantic import BaseModel, ConfigDict


class LoggingConfig(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    json_enabled: bool = False
    service_name: str = "airnope"
    debug_loggers: List[str] = []


class DemoConfig(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    host: str = "0.0.0.0"
    port: int = 24601
    rate_limit_seconds: int = 5
    key_prefix: str = "demo:ip"
