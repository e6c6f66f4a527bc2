from pydantic import BaseModel, field_validator

REF_PREFIX = "refs/heads/"


class WebhookPayload(BaseModel):
    ref: str = ""
    # Everything else GitHub sends (repository, pusher, commits...) is ignored.

    @field_validator("ref", mode="before")
    @classmethod
    def null_as_empty(cls, value):
        return "" if value is None else value

    def branch(self):
        """Return the branch name for a branch push, or None for tags and other refs."""
        if not self.ref.startswith(REF_PREFIX):
            return None
        return self.ref[len(REF_PREFIX):]
