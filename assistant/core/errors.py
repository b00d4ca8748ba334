from __future__ import annotations


class AssistantError(Exception):
    """Base class for errors raised while producing an assistant reply."""


class ConfigurationError(AssistantError):
    """A required setting (the model credential) is missing."""

    def __init__(self, setting: str) -> None:
        super().__init__(f"{setting} not set. Please configure it in environment or .env")
        self.setting = setting


class UpstreamError(AssistantError):
    """The completion service call failed."""


class UpstreamTimeout(UpstreamError):
    """The completion service did not answer within the configured timeout."""


class StoreError(AssistantError):
    pass


class GlossaryReadError(StoreError):
    pass


class LearningWriteError(StoreError):
    pass
