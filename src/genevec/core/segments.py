"""
Segment layout parsing.

A segment is a contiguous range of gene indices sharing one set of
configuration overrides. Segments are declared either by their start
indices or by their end indices:

    base.num-segments = 2
    base.segment-type = start
    base.segment.0.start = 0
    base.segment.1.start = 10
"""

from dataclasses import dataclass
from typing import List, Optional

from src.genevec.core.exceptions import ConfigurationError
from src.genevec.core.parameters import ParameterStore, param_key


P_NUM_SEGMENTS = "num-segments"
P_SEGMENT_TYPE = "segment-type"
P_SEGMENT = "segment"
P_SEGMENT_START = "start"
P_SEGMENT_END = "end"


@dataclass(frozen=True)
class Segment:
    """Inclusive gene-index range [start, end] for one segment."""
    index: int
    start: int
    end: int

    def __contains__(self, gene: int) -> bool:
        return self.start <= gene <= self.end

    def __len__(self) -> int:
        return self.end - self.start + 1


class SegmentLayout:
    """Ordered partition of [0, genome_size) into segments."""

    def __init__(self, segments: List[Segment], genome_size: int):
        self.segments = list(segments)
        self.genome_size = genome_size
        self._validate()
        self._lookup: List[int] = [0] * genome_size
        for segment in self.segments:
            for gene in range(segment.start, segment.end + 1):
                self._lookup[gene] = segment.index

    def _validate(self) -> None:
        if not self.segments:
            raise ConfigurationError("A segment layout needs at least one segment")
        expected_start = 0
        for position, segment in enumerate(self.segments):
            if segment.index != position:
                raise ConfigurationError(f"Segment {segment.index} is out of order")
            if segment.start != expected_start or segment.end < segment.start:
                raise ConfigurationError(
                    f"Segment {segment.index} covers [{segment.start}, {segment.end}] "
                    f"but must start at {expected_start} and be non-empty"
                )
            expected_start = segment.end + 1
        if expected_start != self.genome_size:
            raise ConfigurationError(
                f"Segments cover [0, {expected_start}) but the genome has {self.genome_size} genes"
            )

    @classmethod
    def from_starts(cls, starts: List[int], genome_size: int) -> "SegmentLayout":
        ends = [s - 1 for s in starts[1:]] + [genome_size - 1]
        return cls([Segment(k, s, e) for k, (s, e) in enumerate(zip(starts, ends))], genome_size)

    @classmethod
    def from_ends(cls, ends: List[int], genome_size: int) -> "SegmentLayout":
        starts = [0] + [e + 1 for e in ends[:-1]]
        return cls([Segment(k, s, e) for k, (s, e) in enumerate(zip(starts, ends))], genome_size)

    @classmethod
    def from_store(
        cls,
        store: ParameterStore,
        base: str,
        genome_size: int,
        default_base: Optional[str] = None
    ) -> Optional["SegmentLayout"]:
        """
        Read the segment layout under ``base``.

        Returns None when no ``num-segments`` parameter is defined.
        """
        def key(*parts):
            return param_key(base, *parts)

        def def_key(*parts):
            return param_key(default_base, *parts) if default_base else None

        if not store.exists(key(P_NUM_SEGMENTS), def_key(P_NUM_SEGMENTS)):
            return None

        num_segments = store.get_int(key(P_NUM_SEGMENTS), def_key(P_NUM_SEGMENTS))
        if num_segments < 1 or num_segments > genome_size:
            raise ConfigurationError(
                f"{P_NUM_SEGMENTS} must be between 1 and the genome size ({genome_size}), got {num_segments}",
                key(P_NUM_SEGMENTS),
                num_segments
            )

        segment_type = store.get_string(
            key(P_SEGMENT_TYPE), def_key(P_SEGMENT_TYPE), default=P_SEGMENT_START
        ).lower()
        if segment_type not in (P_SEGMENT_START, P_SEGMENT_END):
            raise ConfigurationError(
                f"{P_SEGMENT_TYPE} must be '{P_SEGMENT_START}' or '{P_SEGMENT_END}', got {segment_type!r}",
                key(P_SEGMENT_TYPE),
                segment_type
            )

        bounds = []
        for k in range(num_segments):
            value = store.get_int(key(P_SEGMENT, k, segment_type), def_key(P_SEGMENT, k, segment_type))
            if value is None:
                raise ConfigurationError(
                    f"Segment {k} is missing its '{segment_type}' index",
                    key(P_SEGMENT, k, segment_type)
                )
            if not 0 <= value < genome_size:
                raise ConfigurationError(
                    f"Segment {k} {segment_type} index {value} is outside the genome",
                    key(P_SEGMENT, k, segment_type),
                    value
                )
            if bounds and value <= bounds[-1]:
                raise ConfigurationError(
                    f"Segment {k} {segment_type} index {value} must be greater than the previous one ({bounds[-1]})",
                    key(P_SEGMENT, k, segment_type),
                    value
                )
            bounds.append(value)

        if segment_type == P_SEGMENT_START:
            return cls.from_starts(bounds, genome_size)
        return cls.from_ends(bounds, genome_size)

    def segment_for(self, gene: int) -> int:
        """Return the index of the segment containing ``gene``."""
        return self._lookup[gene]

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self):
        return iter(self.segments)

    def __repr__(self) -> str:
        ranges = ", ".join(f"[{s.start}, {s.end}]" for s in self.segments)
        return f"SegmentLayout({ranges})"
