"""
Value column names for the wide layout.

Each (data_source, signal, dt) combination becomes one column named
``value<sign><|dt|>:<data_source>_<signal>``, e.g. ``value-1:foo_foo`` or
``value+2:usa-facts_confirmed_incidence_num``. The sign is ``+`` for dt >= 0.
"""
import re
from typing import Iterable, NamedTuple, Optional, Tuple

from epiwrangle.common.errors import FormatError


VALUE_COLUMN_PATTERN = re.compile(r'^value([+-])(\d+):(.+)$')


class SignalKey(NamedTuple):
    data_source: str
    signal: str
    dt: int

    def to_column(self) -> str:
        sign = '+' if self.dt >= 0 else '-'
        return f"value{sign}{abs(self.dt)}:{self.data_source}_{self.signal}"


def parse_value_column(
    column: str,
    known: Optional[Iterable[Tuple[str, str]]] = None
) -> SignalKey:
    """
    Recover the SignalKey encoded in a wide-layout column name.

    The ``<data_source>_<signal>`` part is ambiguous when either name holds
    an underscore. Pairs listed in ``known`` (usually taken from the table's
    metadata) are matched first; otherwise the split happens at the first
    underscore, since source names use hyphens and signal names underscores.

    Args:
        column: Column name such as ``value+2:jhu-csse_confirmed_incidence_num``
        known: Candidate (data_source, signal) pairs

    Returns:
        SignalKey

    Raises:
        FormatError: if the name does not follow the grammar
    """
    match = VALUE_COLUMN_PATTERN.match(str(column))
    if match is None:
        raise FormatError(column)

    sign, magnitude, identity = match.groups()
    dt = int(magnitude) if sign == '+' else -int(magnitude)

    for data_source, signal in known or ():
        if identity == f"{data_source}_{signal}":
            return SignalKey(data_source, signal, dt)

    data_source, sep, signal = identity.partition('_')
    if not sep or not data_source or not signal:
        raise FormatError(
            column, f"Value column {column!r} does not name a <data_source>_<signal> pair"
        )
    return SignalKey(data_source, signal, dt)
