"""Shared enumerations and small records used throughout the simulator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

WORD_SIZE = 1
IND_SIZE = 4
TIMESCALE = 10


class OperandType(IntEnum):
    """Kind of value carried by a data package."""

    WEIGHT = 0
    IACTIVATION = 1
    OACTIVATION = 2
    PSUM = 3
    VTH = 4
    SPIKE = 5


class TrafficType(IntEnum):
    """How a package is delivered to its destinations."""

    BROADCAST = 0
    MULTICAST = 1
    UNICAST = 2


class Direction(IntEnum):
    LEFT = 0
    RIGHT = 1


class ForwardingLinkType(IntEnum):
    """Role of a forwarding link between adders."""

    RECEIVE = 0
    SEND = 1
    NOT_CONFIGURED = 2


class AdderConfig(IntEnum):
    """Configuration signal of an adder switch."""

    ADD_2_1 = 0
    ADD_3_1 = 1
    ADD_1_1_PLUS_FW_1_1 = 2
    FW_2_2 = 3
    NO_MODE = 4
    FOLD = 5


class LayerType(IntEnum):
    CONV = 0
    FC = 1
    POOL = 2


class OSMeshControllerState(IntEnum):
    """States of the output-stationary memory controller."""

    CONFIGURING = 0
    DIST_INPUTS = 1
    WAITING_FOR_NEXT_ITER = 2
    ALL_DATA_SENT = 3


class PoolingMemoryControllerState(IntEnum):
    """States of the pooling module's memory controller."""

    CONFIGURING = 0
    DATA_DIST = 1
    ALL_DATA_SENT = 2


class Dataflow(IntEnum):
    CNN_DATAFLOW = 0
    MK_STA_KN_STR = 1
    MK_STR_KN_STA = 2
    SPARSE_DENSE_DATAFLOW = 3


class GenerationType(IntEnum):
    GEN_BY_ROWS = 0
    GEN_BY_COLS = 1


class WireType(IntEnum):
    RN_WIRE = 0
    MN_WIRE = 1
    DN_WIRE = 2


class AdderOperation(IntEnum):
    ADDER = 0
    COMPARATOR = 1
    MULTIPLIER = 2
    NOP = 3
    UPDATE = 4
    POOLING = 5


class PoolingType(IntEnum):
    MAXPOOLING = 0
    AVERAGEPOOLING = 1


class LayerTest(IntEnum):
    TINY = 0
    LATE_SYNTHETIC = 1
    EARLY_SYNTHETIC = 2
    VGG_CONV11 = 3
    VGG_CONV1 = 4


@dataclass
class LayerTopology:
    """Shape parameters of one network layer."""

    layer_type: str = ""
    r: int = 0
    s: int = 0
    c: int = 0
    k: int = 0
    x: int = 0
    y: int = 0
    p: int = 0
    stride: int = 0
    pooling_size: int = 0
    pooling_stride: int = 0
    input_neuron: int = 0
    output_neuron: int = 0
    batch: int = 0


@dataclass
class PingPongBuffer:
    """Two buffers: one is computed on while the other is being filled."""

    current_buffer: list = field(default_factory=list)
    next_buffer: list = field(default_factory=list)
    toggle: bool = False

    def switch(self) -> None:
        """Exchange the roles of the two buffers."""
        self.current_buffer, self.next_buffer = self.next_buffer, self.current_buffer
        self.toggle = not self.toggle


@dataclass
class Record:
    """Describes one fetch of input rows from off-chip memory."""

    num_rows: int = 0
    start_rows: int = 0
    add_0_above: int = 0
    add_0_below: int = 0