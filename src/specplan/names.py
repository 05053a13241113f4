"""Names primitive types and validation rules.

This module defines the description type shared by groups and examples
and the pattern used to reference a declaration script from the command line.
"""

from re import ASCII
from re import compile as regexp
from typing import Annotated

from pydantic import Field

#: Base pattern for a dotted Python identifier path.
_DOTTED_PATTERN = r'[a-zA-Z_]\w*(\.[a-zA-Z_]\w*)*'

#: Compiled pattern for script references.
#: Accepts `package.module:attribute` and `package.module:Class.attribute`.
TARGET_PATTERN = regexp(
    rf'^(?P<module>{_DOTTED_PATTERN}):(?P<attribute>{_DOTTED_PATTERN})$',
    flags=ASCII,
)


Description = Annotated[
    str, Field(
        min_length=1,
        title='Block description',
        description=(
            'Human-readable description of a group or an example. '
            'Descriptions are matched case-sensitively and must be unique '
            'among the siblings of the same parent group.'
        ),
        examples=[
            'a stack',
            'when empty',
            'raises on pop',
        ],
    ),
]
