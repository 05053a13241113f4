"""Compiler settings.

Settings are read from keyword arguments and `SPECPLAN_*` environment
variables, so a CI job can, for example, forbid focused blocks with
`SPECPLAN_ALLOW_FOCUS=false` or shuffle siblings with
`SPECPLAN_ORDER=random SPECPLAN_SEED=42`.
"""

from datetime import timedelta

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from specplan.models import SettingsModel
from specplan.rank import Order  # noqa: TC001


class SpecSettings(SettingsModel):
    """Settings applied while compiling a declaration tree."""

    model_config = SettingsConfigDict(
        env_prefix='SPECPLAN_',
    )

    order: Order = Field(
        default='defined',
        title='Sibling order',
        description=(
            'Order of sibling groups and examples. '
            '`defined` keeps declaration order, `random` shuffles siblings '
            'with a seeded generator and keeps every group contiguous.'
        ),
    )

    seed: int = Field(
        default=0,
        title='Random order seed',
        description='Seed reproducing a random order.',
    )

    allow_focus: bool = Field(
        default=True,
        title='Allow focus',
        description=(
            'Whether focused blocks are accepted. '
            'When disabled, a focused block fails compilation.'
        ),
    )

    default_timeout: timedelta | None = Field(
        default=None,
        title='Default timeout',
        description='Timeout applied to examples declaring none.',
    )
