"""CLI utilities for inspecting declaration scripts.

Scripts are referenced explicitly as `package.module:attribute`; the
module is imported and the attribute compiled.
"""

from pkgutil import resolve_name
from typing import TYPE_CHECKING

from click import Choice, ClickException, argument, echo, group, option

from specplan.config import SpecSettings
from specplan.core import compile_tree, read_spec
from specplan.errors import SpecError
from specplan.names import TARGET_PATTERN

if TYPE_CHECKING:
    from click import Context, Parameter

    from specplan.core import Script


def _resolve_target(ctx: 'Context', param: 'Parameter', value: str) -> 'Script':  # noqa: ARG001
    """Import the script referenced on the command line.

    Args:
        ctx: Click context.
        param: Parameter being processed.
        value: Reference in the `package.module:attribute` form.

    Returns:
        The referenced declaration script.
    """
    if not TARGET_PATTERN.match(value):
        raise ClickException(f'Invalid script reference {value!r}, expected "package.module:attribute"')

    try:
        return resolve_name(value)  # type: ignore[no-any-return]
    except (ImportError, AttributeError) as base:
        raise ClickException(f'Can not import {value!r}: {base}') from base


@group(help='Command-line utilities for specplan declaration scripts.')
def cli() -> None:
    """Root CLI group for specplan tools."""
    return None


@cli.command(
    name='tree',
    help='Print the declaration tree of a script in declaration order.',
)
@argument('script', callback=_resolve_target)
@option('-n', '--name', help='Description of the root group.', default=None)
def print_tree(script: 'Script', name: str | None) -> None:
    """Evaluate a script and print its declaration tree."""
    try:
        tree = read_spec(script, name=name)
    except SpecError as base:
        raise ClickException(str(base)) from base

    echo(tree.render())


@cli.command(
    name='plan',
    help='Print the compiled execution plan of a script in execution order.',
)
@argument('script', callback=_resolve_target)
@option('-n', '--name', help='Description of the root group.', default=None)
@option(
    '--order',
    type=Choice(['defined', 'random']),
    default=None,
    help='Order of sibling blocks. Defaults to SPECPLAN_ORDER or "defined".',
)
@option('--seed', type=int, default=None, help='Seed of the random order.')
@option(
    '--forbid-focus',
    is_flag=True,
    default=False,
    help='Fail when the script contains focused blocks.',
)
def print_plan(script: 'Script', name: str | None,
               order: str | None, seed: int | None, forbid_focus: bool) -> None:
    """Compile a script and print its execution plan."""
    overrides: dict[str, object] = {}
    if order is not None:
        overrides['order'] = order
    if seed is not None:
        overrides['seed'] = seed
    if forbid_focus:
        overrides['allow_focus'] = False

    try:
        plan = compile_tree(
            read_spec(script, name=name),
            settings=SpecSettings(**overrides),  # type: ignore[arg-type]
        )
    except SpecError as base:
        raise ClickException(str(base)) from base

    echo(plan.render())


if __name__ == '__main__':
    cli()
