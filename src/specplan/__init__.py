"""Behavior-specification compiler.

The `specplan` package turns nested `describe`/`it` declarations into a
flat, deterministically ordered execution plan.

Key features:
- declaration scripts register blocks without an explicit builder, with
  per-thread and per-task isolation of compilation sessions;
- every compiled example carries exactly the hooks in its scope;
- one-time hooks run once per contiguous run of examples sharing them;
- focus and ignore markers are resolved over the whole spec.

The package only compiles declarations; running the plan is left to the
caller (see `specplan.runner` and `specplan.plugin`).
"""

from specplan.config import SpecSettings
from specplan.core import compile_spec, read_spec
from specplan.dsl import (
    after_all,
    after_each,
    before_all,
    before_each,
    context,
    describe,
    fcontext,
    fdescribe,
    fit,
    it,
    let,
    xcontext,
    xdescribe,
    xit,
)
from specplan.examples import Example, ExampleState, ExecutionPlan
from specplan.hooks import Var
from specplan.markers import Marker

__all__ = (
    'Example',
    'ExampleState',
    'ExecutionPlan',
    'Marker',
    'SpecSettings',
    'Var',
    'after_all',
    'after_each',
    'before_all',
    'before_each',
    'compile_spec',
    'context',
    'describe',
    'fcontext',
    'fdescribe',
    'fit',
    'it',
    'let',
    'read_spec',
    'xcontext',
    'xdescribe',
    'xit',
)
