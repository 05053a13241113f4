"""Base Pydantic models for declarations and settings.

Declarations collected from a script are frozen as soon as their scope
closes, so a compiled plan always reflects the tree as it was declared.
"""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Immutable base of declaration and result models.

    Groups, examples and runner results derive from it. Unknown keyword
    arguments are rejected, which catches typos such as `timeuot=` at
    declaration time. Blocks (hooks, bodies, initializers) are stored as
    arbitrary callables.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Immutable base of compiler settings.

    Values passed as keyword arguments take precedence over environment
    variables (for example, values exported by a CI job). Unrelated
    variables sharing the prefix are ignored.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
