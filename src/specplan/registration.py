"""Registration context for declaration scripts.

DSL functions such as `describe` or `it` receive no explicit builder.
They register against the collector of the compilation session active on
the calling execution context. Sessions are stored in a context variable,
so every thread and every asyncio task compiles in isolation.
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

from specplan.errors import IllegalContext

if TYPE_CHECKING:
    from collections.abc import Iterator

if TYPE_CHECKING:
    from specplan.core.collector import DeclarationCollector

_collector: ContextVar['DeclarationCollector | None'] = ContextVar(
    'specplan_collector',
    default=None,
)


def begin(collector: 'DeclarationCollector') -> Token['DeclarationCollector | None']:
    """Install a collector as current for the calling execution context.

    Args:
        collector: Empty collector receiving the declarations.

    Returns:
        Token restoring the previous state on `end`.

    Raises:
        IllegalContext: If a session is already active on this context.
    """
    if (active := _collector.get()) is not None:
        raise IllegalContext(
            f'Spec {active.description!r} is still being compiled, '
            'nested compilation is not allowed',
        )

    return _collector.set(collector)


def end(token: Token['DeclarationCollector | None']) -> None:
    """Tear down the session installed by `begin`."""
    _collector.reset(token)


def current(name: str) -> 'DeclarationCollector':
    """Return the collector of the active session.

    Args:
        name: Name of the DSL function asking, used in the error message.

    Raises:
        IllegalContext: If no session is active on this context.
    """
    if (collector := _collector.get()) is None:
        raise IllegalContext.outside_spec(name)

    return collector


def is_active() -> bool:
    """Whether a session is active on the calling execution context."""
    return _collector.get() is not None


@contextmanager
def session(collector: 'DeclarationCollector') -> 'Iterator[DeclarationCollector]':
    """Run a block with `collector` installed as current.

    The session is torn down on every exit path, including failures
    raised by the declaration script.

    Args:
        collector: Empty collector receiving the declarations.

    Yields:
        The installed collector.
    """
    token = begin(collector)
    try:
        yield collector
    finally:
        end(token)
