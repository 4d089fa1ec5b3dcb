"""
Chunk
=====

Immutable, row-indexed columnar batch emitted by message parsers.

A Chunk holds, for one entity path:
    - row_ids: unique, increasing uint64 per row
    - timelines: one TimeColumn per time base
    - components: one arrow column per ComponentDescriptor

All of these have the same length. Two chunks built from the same
ParserContext share their timelines and can be joined by row position.

Design Rules:
    - Lengths are checked once, at construction
    - Columns are never copied or mutated after construction
    - Chunk identity comes from a ChunkId generator
"""

import itertools
import os
import threading
import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Union

import numpy as np
import pyarrow as pa

from ros2_image_loader.chunk.timeline import TimeColumn
from ros2_image_loader.errors import BatchConstructionError


Column = Union[pa.Array, pa.ChunkedArray]


@dataclass(frozen=True, slots=True)
class ComponentDescriptor:
    """
    Name of a component column, optionally tagged with its archetype.

    Attributes:
        component: Component name, e.g. "buffer" or "height"
        archetype: Owning archetype, e.g. "Image"
    """

    component: str
    archetype: Optional[str] = None

    @classmethod
    def partial(cls, component: str) -> "ComponentDescriptor":
        """Descriptor with no archetype attached yet."""
        return cls(component=component)

    def with_archetype(self, archetype: str) -> "ComponentDescriptor":
        return ComponentDescriptor(component=self.component, archetype=archetype)

    @property
    def qualified_name(self) -> str:
        """Name in the form "Archetype:component", or the bare component."""
        if self.archetype is None:
            return self.component
        return f"{self.archetype}:{self.component}"

    def __str__(self) -> str:
        return self.qualified_name


@dataclass(frozen=True, slots=True, order=True)
class ChunkId:
    """
    Time-ordered 128-bit chunk identifier.

    The high 64 bits are the creation time in nanoseconds, the low 64 bits
    an increment seeded randomly per process.
    """

    time_ns: int
    inc: int

    def __str__(self) -> str:
        return f"{self.time_ns:016x}{self.inc:016x}"


_chunk_inc = itertools.count(int.from_bytes(os.urandom(7), "little"))


def new_chunk_id() -> ChunkId:
    """Generate a fresh, unique ChunkId."""
    return ChunkId(time_ns=time.time_ns(), inc=next(_chunk_inc) & 0xFFFF_FFFF_FFFF_FFFF)


ChunkIdGenerator = Callable[[], ChunkId]


_row_id_lock = threading.Lock()
_next_row_id = 0


def _reserve_row_ids(count: int) -> pa.UInt64Array:
    global _next_row_id
    with _row_id_lock:
        start = _next_row_id
        _next_row_id += count
    return pa.array(np.arange(start, start + count, dtype=np.uint64), type=pa.uint64())


class Chunk:
    """
    Immutable columnar batch.

    Use Chunk.from_auto_row_ids() to build one.

    Attributes:
        id: Unique chunk identifier
        entity_path: Entity the rows belong to
        row_ids: uint64 row identifiers
        timelines: Time index, by timeline name
        components: Columns, by descriptor
        num_rows: Row count shared by every column
    """

    __slots__ = ("_id", "_entity_path", "_row_ids", "_timelines", "_components")

    def __init__(
        self,
        chunk_id: ChunkId,
        entity_path: str,
        row_ids: pa.UInt64Array,
        timelines: Mapping[str, TimeColumn],
        components: Mapping[ComponentDescriptor, Column],
    ) -> None:
        self._id = chunk_id
        self._entity_path = entity_path
        self._row_ids = row_ids
        self._timelines = MappingProxyType(dict(timelines))
        self._components = MappingProxyType(dict(components))

    @classmethod
    def from_auto_row_ids(
        cls,
        chunk_id: ChunkId,
        entity_path: str,
        timelines: Mapping[str, TimeColumn],
        components: Mapping[ComponentDescriptor, Column],
    ) -> "Chunk":
        """
        Build a chunk, generating row ids for it.

        Args:
            chunk_id: Identifier for the new chunk
            entity_path: Entity the rows belong to
            timelines: Time index, one entry per row in each column
            components: Component columns

        Returns:
            New Chunk

        Raises:
            BatchConstructionError: If any column or timeline length
                differs from the others
        """
        lengths: Dict[str, int] = {}
        for name, column in timelines.items():
            lengths[f"timeline {name!r}"] = len(column)
        for descriptor, column in components.items():
            lengths[f"component {descriptor.qualified_name!r}"] = len(column)

        distinct = set(lengths.values())
        if len(distinct) > 1:
            detail = ", ".join(f"{k}={v}" for k, v in lengths.items())
            raise BatchConstructionError(
                f"Column length mismatch in chunk for {entity_path}: {detail}"
            )
        num_rows = distinct.pop() if distinct else 0

        return cls(
            chunk_id=chunk_id,
            entity_path=entity_path,
            row_ids=_reserve_row_ids(num_rows),
            timelines=timelines,
            components=components,
        )

    @property
    def id(self) -> ChunkId:
        return self._id

    @property
    def entity_path(self) -> str:
        return self._entity_path

    @property
    def row_ids(self) -> pa.UInt64Array:
        return self._row_ids

    @property
    def timelines(self) -> Mapping[str, TimeColumn]:
        return self._timelines

    @property
    def components(self) -> Mapping[ComponentDescriptor, Column]:
        return self._components

    @property
    def num_rows(self) -> int:
        return len(self._row_ids)

    def __len__(self) -> int:
        return self.num_rows

    def component(self, key: Union[ComponentDescriptor, str]) -> Column:
        """
        Look up a component column.

        Args:
            key: A descriptor, a qualified name ("Image:buffer") or a bare
                component name ("buffer")

        Raises:
            KeyError: If no column matches
        """
        if isinstance(key, ComponentDescriptor):
            return self._components[key]
        for descriptor, column in self._components.items():
            if key in (descriptor.qualified_name, descriptor.component):
                return column
        raise KeyError(key)

    def to_arrow_table(self) -> pa.Table:
        """
        Flatten into a single arrow table.

        Columns are `row_id`, then one per timeline, then one per component
        (named by qualified name, with archetype/component in field metadata).
        """
        fields = [pa.field("row_id", pa.uint64(), nullable=False)]
        arrays = [self._row_ids]

        for name, column in self._timelines.items():
            fields.append(pa.field(name, column.times.type, metadata={"kind": "timeline"}))
            arrays.append(column.times)

        for descriptor, column in self._components.items():
            metadata = {"kind": "component", "component": descriptor.component}
            if descriptor.archetype is not None:
                metadata["archetype"] = descriptor.archetype
            fields.append(pa.field(descriptor.qualified_name, column.type, metadata=metadata))
            arrays.append(column)

        schema = pa.schema(fields, metadata={"entity_path": self._entity_path, "chunk_id": str(self._id)})
        return pa.Table.from_arrays(arrays, schema=schema)

    def __repr__(self) -> str:
        return (
            f"Chunk(id={self._id}, entity_path={self._entity_path!r}, "
            f"rows={self.num_rows}, timelines={list(self._timelines)}, "
            f"components={[d.qualified_name for d in self._components]})"
        )
