""" Sort keys: named composite orderings that cursors point into """

from __future__ import annotations

from collections import abc
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Optional, Union

from cursorable import exc


class SortingDirection(Enum):
    """ Sorting direction of a single column """
    ASC = 'asc'
    DESC = 'desc'

    def reversed(self) -> SortingDirection:
        return SortingDirection.DESC if self == SortingDirection.ASC else SortingDirection.ASC


class NullsPlacement(Enum):
    """ Where NULL values go in the ordering """
    FIRST = 'NULLS FIRST'
    LAST = 'NULLS LAST'

    def reversed(self) -> NullsPlacement:
        return NullsPlacement.LAST if self == NullsPlacement.FIRST else NullsPlacement.FIRST


@dataclass(frozen=True)
class ColumnSort:
    """ One axis of a total order: a column and how to sort it """
    # Column name, as known to the model
    column: str

    # Sort direction
    direction: SortingDirection = SortingDirection.ASC

    # Whether the direction is flipped when paginating backward.
    # This lets us fetch the tail of the ordering with a plain ORDER BY ... LIMIT n
    reversible: bool = False

    # Whether the column holds timestamps: they are stored in cursors as ISO-8601 strings
    timestamp: bool = False

    # SQL modifier for ORDER BY: 'NULLS FIRST', 'NULLS LAST', or a collation name
    modifier: Optional[str] = None

    def __post_init__(self):
        # Accept plain strings: 'asc', 'desc'
        if not isinstance(self.direction, SortingDirection):
            try:
                object.__setattr__(self, 'direction', SortingDirection(str(self.direction).lower()))
            except ValueError as e:
                raise exc.InvalidSortKeyError(f'Invalid sort direction for {self.column!r}: {self.direction!r}') from e

    @property
    def nulls(self) -> NullsPlacement:
        """ Where NULLs go. Default: NULLS LAST """
        if self.modifier and self.modifier.strip().upper() == NullsPlacement.FIRST.value:
            return NullsPlacement.FIRST
        return NullsPlacement.LAST

    @property
    def collation(self) -> Optional[str]:
        """ Collation name, if the modifier is one """
        if not self.modifier or self.modifier.strip().upper() in {p.value for p in NullsPlacement}:
            return None
        return self.modifier.strip()

    def effective(self, backward: bool) -> EffectiveColumnSort:
        """ Get the direction actually used in the query

        When paginating backward, reversible columns are flipped: both the direction and the NULLs placement,
        so that the query order is the exact reverse of the forward order.
        Non-reversible columns keep their base direction.
        """
        if backward and self.reversible:
            return EffectiveColumnSort(self, self.direction.reversed(), self.nulls.reversed())
        else:
            return EffectiveColumnSort(self, self.direction, self.nulls)

    @classmethod
    def ensure(cls, value: Union[ColumnSort, str, tuple[str, dict]]) -> ColumnSort:
        """ Convert the shorthand forms into a ColumnSort

        Accepted forms:
        * ColumnSort(...)
        * 'column'
        * ('column', {'direction': 'desc', 'reversible': True})
        """
        if isinstance(value, ColumnSort):
            return value
        elif isinstance(value, str):
            return cls(column=value)
        elif isinstance(value, (tuple, list)) and len(value) == 2 and isinstance(value[1], dict):
            column, options = value
            unknown = set(options) - {'direction', 'reversible', 'timestamp', 'modifier'}
            if unknown:
                raise exc.InvalidSortKeyError(f'Unknown column sort options for {column!r}: {sorted(unknown)}')
            return cls(column=column, **options)
        else:
            raise exc.InvalidSortKeyError(f'Cannot use {value!r} as a column sort')


@dataclass(frozen=True)
class EffectiveColumnSort:
    """ A column sort, as applied to a specific query """
    column_sort: ColumnSort
    direction: SortingDirection
    nulls: NullsPlacement

    @property
    def column(self) -> str:
        return self.column_sort.column

    @property
    def is_asc(self) -> bool:
        return self.direction == SortingDirection.ASC

    @property
    def nulls_first(self) -> bool:
        return self.nulls == NullsPlacement.FIRST


@dataclass(frozen=True)
class SortKeySpec:
    """ A named, ordered, non-empty list of column sorts

    Defines a lexicographic total order over rows.
    NOTE: cursors encode values in the order of `columns`. Changing the columns invalidates issued cursors.
    """
    name: str
    columns: tuple[ColumnSort, ...]

    def __post_init__(self):
        if not self.columns:
            raise exc.InvalidSortKeyError(f'Sort key {self.name!r} must have at least one column')

    def __len__(self):
        return len(self.columns)

    def __iter__(self) -> abc.Iterator[ColumnSort]:
        return iter(self.columns)

    @cached_property
    def names(self) -> tuple[str, ...]:
        """ Column names, in order """
        return tuple(column.column for column in self.columns)

    def effective(self, backward: bool) -> tuple[EffectiveColumnSort, ...]:
        """ Get effective column sorts for the given pagination direction """
        return tuple(column.effective(backward) for column in self.columns)


class SortKeyRegistry:
    """ Named sort keys, in registration order

    Sort keys are registered once, at setup time, and are read-only thereafter.

    Example:
        registry = SortKeyRegistry()
        registry.register('newest', [
            ColumnSort('created_at', 'desc', reversible=True, timestamp=True),
            ColumnSort('id', 'desc', reversible=True),
        ])
        registry.resolve()  # -> 'newest'
    """
    # Sort keys: name => spec
    _sort_keys: dict[str, SortKeySpec]

    # Name of the key to use when none is specified
    default_name: Optional[str]

    # Frozen registries refuse new sort keys
    _frozen: bool

    def __init__(self, default_name: Optional[str] = None):
        self._sort_keys = {}
        self.default_name = default_name
        self._frozen = False

    __slots__ = '_sort_keys', 'default_name', '_frozen'

    def register(self, name: str, columns: abc.Iterable[Union[ColumnSort, str, tuple[str, dict]]]) -> SortKeySpec:
        """ Register a sort key

        Raises:
            exc.InvalidSortKeyError: duplicate name, empty column list, registry frozen
        """
        if self._frozen:
            raise exc.InvalidSortKeyError(f'Cannot register sort key {name!r}: the registry is read-only now')
        if name in self._sort_keys:
            raise exc.InvalidSortKeyError(f'Sort key {name!r} is already registered')

        spec = SortKeySpec(name=name, columns=tuple(ColumnSort.ensure(c) for c in columns))

        # Each column may appear only once: otherwise the cursor tuple is ambiguous
        if len(set(spec.names)) != len(spec.names):
            raise exc.InvalidSortKeyError(f'Sort key {name!r} mentions the same column twice: {spec.names}')

        self._sort_keys[name] = spec
        return spec

    def freeze(self):
        """ Make the registry read-only """
        if self.default_name is not None and self.default_name not in self._sort_keys:
            raise exc.InvalidSortKeyError(f'Default sort key {self.default_name!r} is not registered')
        self._frozen = True
        return self

    def resolve(self, name: Optional[str] = None) -> SortKeySpec:
        """ Get a sort key by name

        Args:
            name: The sort key name. `None` means "omitted": use the default key, or the first registered one.

        Raises:
            exc.UnknownSortKey: the name was given explicitly, but no such key is registered
        """
        # Omitted: use the default
        if name is None:
            if not self._sort_keys:
                raise exc.InvalidSortKeyError('No sort keys registered')
            name = self.default_name if self.default_name is not None else next(iter(self._sort_keys))

        # Explicit name
        try:
            return self._sort_keys[name]
        except KeyError:
            raise exc.UnknownSortKey(name, self._sort_keys) from None

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._sort_keys)

    def __contains__(self, name: str):
        return name in self._sort_keys

    def __iter__(self) -> abc.Iterator[SortKeySpec]:
        return iter(self._sort_keys.values())

    def __len__(self):
        return len(self._sort_keys)
