"""Exception hierarchy for docflow."""


class DocflowError(Exception):
    """Base exception for all docflow errors."""
    pass


class ConfigurationError(DocflowError):
    """Required configuration is missing or invalid."""
    pass


class InvalidVariableName(DocflowError):
    """A context variable name was empty."""
    pass


class MissingVariable(DocflowError):
    """A skill asked for a context variable the caller never set.

    This is a contract violation by the caller, not bad runtime data,
    so it is never retried.
    """

    def __init__(self, name: str, skill_name: str | None = None):
        self.name = name
        self.skill_name = skill_name
        where = f" (required by {skill_name})" if skill_name else ""
        super().__init__(f"Missing context variable '{name}'{where}")


class AuthenticationFailed(DocflowError):
    """No token could be acquired, silently or interactively."""
    pass


class ExternalCallFailed(DocflowError):
    """A native skill's external API call failed."""

    def __init__(self, skill_name: str, cause: BaseException | str):
        self.skill_name = skill_name
        self.cause = cause
        super().__init__(f"{skill_name} failed: {cause}")


class CompletionFailed(DocflowError):
    """The completion backend failed or returned nothing."""

    def __init__(self, cause: BaseException | str):
        self.cause = cause
        super().__init__(f"Completion failed: {cause}")


class SkillNotFound(DocflowError):
    """A plan referenced a skill the registry does not hold."""
    pass
