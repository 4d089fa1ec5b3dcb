"""
Timelines and Parser Context
============================

Host-owned time index shared by all chunks produced for one channel.

A timeline is a named sequence of time points, one per row. Several
timelines can index the same rows (sensor time, recorder log time,
publisher time).

Design Rules:
    - Append-only; one writer per channel
    - Parsers add their sensor timeline via add_time_cell()
    - The host adds `log_time` / `publish_time` via add_message_times()
    - build_timelines() is only read at finalize time
"""

import logging
from dataclasses import dataclass
from typing import Dict, List

import numpy as np
import pyarrow as pa

from ros2_image_loader.models.channel import Message


logger = logging.getLogger(__name__)


LOG_TIME = "log_time"
PUBLISH_TIME = "publish_time"


@dataclass(frozen=True, slots=True)
class TimeColumn:
    """
    One finished timeline.

    Attributes:
        name: Timeline name, e.g. "timestamp"
        times: `timestamp[ns]` array, one entry per row
    """

    name: str
    times: pa.TimestampArray

    def __len__(self) -> int:
        return len(self.times)


def entity_path_for_topic(topic: str) -> str:
    """
    Derive an entity path from a channel topic.

    Empty path segments are dropped, so "camera//image/" becomes
    "/camera/image".
    """
    parts = [part for part in topic.split("/") if part]
    return "/" + "/".join(parts)


class ParserContext:
    """
    Per-channel context handed to a message parser.

    Example:
        ctx = ParserContext("/camera/image_raw")
        ctx.add_time_cell("timestamp", 1_700_000_000_000_000_000)
        timelines = ctx.build_timelines()
    """

    def __init__(self, entity_path: str) -> None:
        self._entity_path = entity_path
        self._times: Dict[str, List[int]] = {}

    def entity_path(self) -> str:
        """Entity path the produced chunks are logged under."""
        return self._entity_path

    def add_time_cell(self, timeline_name: str, timestamp_ns: int) -> None:
        """
        Append one time point to a timeline.

        Args:
            timeline_name: Timeline to append to (created on first use)
            timestamp_ns: Nanoseconds since the UNIX epoch
        """
        self._times.setdefault(timeline_name, []).append(int(timestamp_ns))

    def add_message_times(self, message: Message) -> None:
        """Register the recorder and publisher times of one message."""
        self.add_time_cell(LOG_TIME, message.log_time)
        self.add_time_cell(PUBLISH_TIME, message.publish_time)

    def build_timelines(self) -> Dict[str, TimeColumn]:
        """
        Build the finished time index.

        Returns:
            Mapping of timeline name to TimeColumn, in creation order
        """
        timelines = {}
        for name, values in self._times.items():
            times = pa.array(
                np.asarray(values, dtype=np.int64),
                type=pa.timestamp("ns"),
            )
            timelines[name] = TimeColumn(name=name, times=times)

        logger.debug(
            f"Built {len(timelines)} timelines for {self._entity_path}: "
            + ", ".join(f"{n}={len(c)}" for n, c in timelines.items())
        )
        return timelines
