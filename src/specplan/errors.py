"""Core exception hierarchy.

Errors raised while declaring or compiling a spec point at the offending
block: the spec name, the path of enclosing groups and a short YAML outline
of the tree around it. Non-fatal issues are reported as warnings.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import dump

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

OUTLINE_HEADER = '...'
OUTLINE_INDENT = 2

LOCATION_INDENT = 4
ANONYMOUS_SPEC = '<anonymous spec>'


class ErrorContext(TypedDict, total=False):
    """Position of a failure inside a declaration tree.

    Every key is optional; missing keys shorten the formatted message.
    """

    #: Description of the root group (usually the script name).
    spec: str | None

    #: Descriptions of the groups enclosing the failing block, root excluded.
    path: 'Sequence[str] | None'
    #: Description of the failing block.
    block: str | None
    #: DSL function which declared the failing block.
    kind: str | None

    #: Exception raised by the declaration script.
    error: Exception | None


class ErrorFormatter:
    """Mixin rendering errors together with their place in the tree.

    A formatted message is the bare message followed by location lines
    and an outline of the failing block:

        Block 'same' is already defined
            in spec "stack"
            at 'when empty'
                ...
                stack:
                  when empty:
                  - it: same
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Append location lines and an outline to a message.

        Args:
            message: Bare human-readable message.
            context: Position of the failure, if known.

        Returns:
            The formatted message, or the bare one without a context.
        """
        if not context:
            return message

        lines = [message, *cls.location_lines(context)]
        lines.extend(cls.indent(cls.outline_lines(context), LOCATION_INDENT * 2))

        return linesep.join(lines) + linesep

    @classmethod
    def location_lines(cls, context: ErrorContext) -> list[str]:
        """Name the spec and the enclosing groups of a failure."""
        spec = context.get('spec') or ANONYMOUS_SPEC
        lines = [f'in spec "{spec}"']

        if path := context.get('path'):
            lines.append(f'at {' > '.join(repr(item) for item in path)}')

        return cls.indent(lines, LOCATION_INDENT)

    @classmethod
    def outline_lines(cls, context: ErrorContext) -> list[str]:
        """Outline the failing block as nested YAML mappings.

        Args:
            context: Position of the failure.

        Returns:
            Outline lines, or nothing when the failing block is unknown.
        """
        if not (block := context.get('block')):
            return []

        outline: Any = [{context.get('kind') or 'block': block}]
        for description in reversed([
            context.get('spec') or ANONYMOUS_SPEC,
            *(context.get('path') or ()),
        ]):
            outline = {description: outline}

        text = dump(outline, indent=OUTLINE_INDENT, sort_keys=False, allow_unicode=True)

        return [OUTLINE_HEADER, *(line for line in text.splitlines() if line.strip())]

    @staticmethod
    def indent(lines: 'Iterable[str]', width: int) -> list[str]:
        """Shift lines right by `width` spaces."""
        return [f'{' ' * width}{line}' for line in lines]


class FocusedSpecWarning(UserWarning):
    """Warning emitted when focused blocks skip the rest of a spec.

    Focus is a debugging aid; leaving it in a committed spec silently
    disables every other example, so each compilation reports it.
    """


class SpecError(Exception, ErrorFormatter):
    """Base exception for all specplan errors.

    Callers may catch this class to handle every declaration and
    compilation failure in one place.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Bare human-readable message.
            context: Position of the failure in the declaration tree.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """Message with location lines."""
        return self.format(self.message, self.context)


class IllegalContext(SpecError):
    """Error raised when the DSL is used outside a declaration script.

    Every DSL function requires an active compilation session on the
    calling execution context. Starting a second session while one is
    active on the same context raises this error as well.
    """

    @classmethod
    def outside_spec(cls, name: str) -> 'IllegalContext':
        """Create an error for a DSL call without an active session.

        Args:
            name: Name of the DSL function that was called.

        Returns:
            IllegalContext naming the offending function.
        """
        return cls(f'{name!r} should not be invoked from outside a spec definition')


class BlockAlreadyDefined(SpecError):
    """Error raised when two sibling blocks share a description.

    Groups and examples of the same parent share one namespace;
    the comparison is exact and case-sensitive.
    """

    def __init__(self, description: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize a duplicate block error.

        Args:
            description: Description declared twice.
            context: Position of the duplicate in the tree.
        """
        self.description = description

        super().__init__(f'Block {description!r} is already defined', context=context)


class SpecInitializationFailed(SpecError):
    """Error raised when a declaration script cannot be evaluated.

    The underlying exception is chained as `__cause__` and
    kept in the error context.
    """

    @classmethod
    def from_error(cls, spec: str, error: Exception) -> 'SpecInitializationFailed':
        """Wrap an exception raised by a declaration script.

        Args:
            spec: Name of the evaluated spec.
            error: Exception raised while evaluating the script.

        Returns:
            SpecInitializationFailed describing the failure.
        """
        message = f'Failed to evaluate spec{linesep}{' ' * LOCATION_INDENT}{error!r}'

        return cls(message, context=ErrorContext(spec=spec, error=error))


class FocusNotAllowed(SpecError):
    """Error raised when focused blocks are found while focus is forbidden.

    Focus is usually forbidden on CI to keep a stray `fit` from
    silently skipping the rest of the suite.
    """


class IllegalState(SpecError):
    """Error raised on an invalid example state transition."""
