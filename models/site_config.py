import re

from pydantic import BaseModel, ConfigDict, field_validator
from typing import List, Optional

MAX_PORT = 65535
PORT_PATTERN = re.compile(r"[0-9]+")


class BranchConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    branch: str = ""
    target_dir: str = ""

    @field_validator("branch", "target_dir", mode="before")
    @classmethod
    def null_as_empty(cls, value):
        return "" if value is None else value


class NotificationSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    slack_webhook_url: str = ""

    @field_validator("slack_webhook_url", mode="before")
    @classmethod
    def null_as_empty(cls, value):
        return "" if value is None else value


class SiteConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    git_url: str = ""
    port: str = ""
    branch_configs: List[BranchConfig] = []
    notifications: NotificationSettings = NotificationSettings()

    # JSON null means "not set", so it reaches validate_settings as an empty value.
    @field_validator("git_url", "port", mode="before")
    @classmethod
    def null_as_empty_string(cls, value):
        return "" if value is None else value

    @field_validator("branch_configs", mode="before")
    @classmethod
    def null_as_empty_list(cls, value):
        if value is None:
            return []
        if isinstance(value, list):
            return [{} if item is None else item for item in value]
        return value

    @field_validator("notifications", mode="before")
    @classmethod
    def null_as_defaults(cls, value):
        return {} if value is None else value

    def validate_settings(self) -> List[str]:
        """
        Collect every problem with the configuration instead of stopping at the first one.

        Returns:
            list: Human-readable problems, empty when the configuration is usable.
        """
        problems = []

        if not self.git_url:
            problems.append("missing git_url")

        if not self.port:
            problems.append("missing port")
        elif not PORT_PATTERN.fullmatch(self.port) or not 0 < int(self.port) <= MAX_PORT:
            problems.append(f"invalid port {self.port}")

        if not self.branch_configs:
            problems.append("missing branch_configs")

        for i, branch_config in enumerate(self.branch_configs):
            if not branch_config.branch:
                problems.append(f"branch config #{i} (0-indexed) missing branch")
            if not branch_config.target_dir:
                problems.append(f"branch config #{i} (0-indexed) missing target_dir")

        return problems

    def target_dir_for(self, branch: str) -> Optional[str]:
        # First match wins; duplicate branch entries further down are never used.
        for branch_config in self.branch_configs:
            if branch_config.branch == branch:
                return branch_config.target_dir
        return None
