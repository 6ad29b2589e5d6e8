"""2x2 OR-pooling of spike maps: pooling units, the module and its memory controller."""

from __future__ import annotations

from typing import MutableSequence, Sequence

from .packets import Connection, Fifo, PoolingPackage
from .types import PoolingMemoryControllerState


class PoolingUnit:
    """ORs a 2x2 window delivered as two pairs of spikes."""

    def __init__(self, location: int, output_connection: Connection, name: str | None = None) -> None:
        self.location = location
        self.name = name or f"poolingUnit{location}"
        self.output_connection = output_connection
        self.input_fifo: Fifo[PoolingPackage] = Fifo(1)
        self.output_fifo: Fifo[PoolingPackage] = Fifo(1)
        self.reset_signals()

    def reset_signals(self) -> None:
        self.operate_num = 2
        self.current_num = 0
        self.result = False

    def cycle(self) -> None:
        if not self.input_fifo.is_empty():
            package = self.input_fifo.front()
            if len(package.values) != 2:
                raise ValueError(f"a pooling unit expects 2 values, got {len(package.values)}")
            self.result = bool(self.result or any(package.values))
            if self.current_num == self.operate_num - 1:
                self.output_fifo.push(PoolingPackage(
                    channel=package.channel,
                    retrieve=package.retrieve,
                    location=self.location,
                    result=self.result,
                ))
                self.current_num = 0
                self.result = False
            else:
                self.current_num += 1
            self.input_fifo.pop()

        if not self.output_fifo.is_empty():
            self.output_connection.send([self.output_fifo.pop()])


class PoolingModule:
    """Splits a row of spikes into pairs and hands them to its pooling units."""

    def __init__(self, ms_cols: int) -> None:
        self.pooling_num = ms_cols // 2
        self.input_connection = Connection(1)
        self.units = [
            PoolingUnit(i, Connection(1)) for i in range(self.pooling_num)
        ]

    def receive(self) -> None:
        if not self.input_connection.has_pending_data():
            return
        received = self.input_connection.receive()
        if len(received) != 1:
            raise ValueError(f"expected one package per cycle, got {len(received)}")
        package = received[0]
        values = package.values
        pairs = list(zip(values[0::2], values[1::2]))
        if len(pairs) > len(self.units):
            raise ValueError(
                f"{len(pairs)} pairs of spikes for only {len(self.units)} pooling units"
            )
        for unit, pair in zip(self.units, pairs):
            unit.input_fifo.push(PoolingPackage(
                channel=package.channel, retrieve=package.retrieve, values=pair,
            ))

    def cycle(self) -> None:
        self.receive()
        for unit in self.units:
            unit.cycle()

    def output_connections(self) -> dict[int, Connection]:
        return {i: unit.output_connection for i, unit in enumerate(self.units)}

    def reset_signals(self) -> None:
        for unit in self.units:
            unit.reset_signals()


class PoolingMemory:
    """Feeds two rows per channel from on-chip SRAM to the pooling module and stores results."""

    def __init__(self, ms_rows: int) -> None:
        self.num_unit = ms_rows // 2
        self.sram_bus_width = ms_rows
        self.num_row = 2

        self.current_num_channels = 0
        self.current_num_retrieve = 0
        self.current_num_row = 0
        self.current_state = PoolingMemoryControllerState.CONFIGURING

        self.input_fifo: Fifo[PoolingPackage] = Fifo(1)
        self.write_fifos: list[Fifo[PoolingPackage]] = [Fifo(1) for _ in range(self.num_unit)]

        self.layer_loaded = False
        self.required_output = 0
        self.current_output = 0
        self.execution_finished = False

        self.num_channels = 0
        self.y = 0
        self.num_retrieve = 0
        self.on_chip_sram: Sequence[int] = ()
        self.output_regs: MutableSequence[int] = []

        self._module: PoolingModule | None = None
        self._read_connection: Connection | None = None
        self._write_connections: list[Connection] = []

    def set_layer(self, y: int, channels: int, input_data: Sequence[int],
                  output_data: MutableSequence[int]) -> None:
        self.num_channels = channels
        self.y = y
        self.on_chip_sram = input_data
        self.output_regs = output_data
        self.num_retrieve = -(-y // self.sram_bus_width)
        self.layer_loaded = True

    def connect(self, pooling_module: PoolingModule) -> None:
        """Wire this memory to the input and the outputs of a pooling module."""
        outputs = list(pooling_module.output_connections().values())
        if len(outputs) != self.num_unit:
            raise ValueError(
                f"pooling module has {len(outputs)} units, memory expects {self.num_unit}"
            )
        self._module = pooling_module
        self._read_connection = pooling_module.input_connection
        self._write_connections = outputs

    def is_execution_finished(self) -> bool:
        return self.execution_finished

    def _distribute(self) -> None:
        address = (
            self.current_num_channels * 2 * self.y
            + self.current_num_row * self.y
            + self.current_num_retrieve * self.sram_bus_width
        )
        if self.current_num_retrieve == self.num_retrieve - 1:
            length = self.y - self.sram_bus_width * self.current_num_retrieve
        else:
            length = self.sram_bus_width
        values = tuple(bool(v) for v in self.on_chip_sram[address:address + length])
        self.input_fifo.push(PoolingPackage(
            channel=self.current_num_channels,
            retrieve=self.current_num_retrieve,
            values=values,
        ))

        self.current_num_row += 1
        if self.current_num_row == self.num_row:
            self.current_num_row = 0
            self.current_num_retrieve += 1
            if self.current_num_retrieve == self.num_retrieve:
                self.current_num_retrieve = 0
                self.current_num_channels += 1
                if self.current_num_channels == self.num_channels:
                    self.current_num_channels = 0
                    self.current_state = PoolingMemoryControllerState.ALL_DATA_SENT

    def _receive(self) -> None:
        for connection, fifo in zip(self._write_connections, self.write_fifos):
            if connection.has_pending_data():
                for package in connection.receive():
                    fifo.push(package)

    def _send(self) -> None:
        if not self.input_fifo.is_empty() and self._read_connection is not None:
            self._read_connection.send([self.input_fifo.pop()])

    def cycle(self) -> None:
        if not self.layer_loaded:
            raise RuntimeError("no layer has been loaded into the pooling memory")
        if self._module is None:
            raise RuntimeError("the pooling memory is not connected to a pooling module")

        if self.current_state is PoolingMemoryControllerState.CONFIGURING:
            self._module.reset_signals()
            self.required_output = self.num_channels * (self.y // 2)

        if self.current_state is PoolingMemoryControllerState.DATA_DIST:
            self._distribute()

        self._receive()

        for fifo in self.write_fifos:
            if fifo.is_empty():
                continue
            package = fifo.pop()
            addr = (package.channel * self.y) // 2 + package.retrieve * self.num_unit + package.location
            self.output_regs[addr] = int(package.result)
            self.current_output += 1
            if self.current_output == self.required_output:
                self.execution_finished = True

        if self.current_state is PoolingMemoryControllerState.CONFIGURING:
            self.current_state = PoolingMemoryControllerState.DATA_DIST

        self._send()


def run_pooling(ms_rows: int, ms_cols: int, y: int, channels: int,
                input_data: Sequence[int]) -> list[int]:
    """Pool ``channels`` maps of 2 rows by ``y`` columns into ``channels * y // 2`` outputs."""
    if ms_rows < 2 or ms_rows % 2:
        raise ValueError("ms_rows must be an even number of at least 2")
    if y < 2:
        raise ValueError("y must be at least 2")
    if channels < 1:
        raise ValueError("channels must be at least 1")
    if len(input_data) < channels * 2 * y:
        raise ValueError(f"input needs {channels * 2 * y} values, got {len(input_data)}")

    output = [0] * (channels * y // 2)
    memory = PoolingMemory(ms_rows)
    module = PoolingModule(ms_cols)
    memory.connect(module)
    memory.set_layer(y, channels, input_data, output)
    while not memory.is_execution_finished():
        memory.cycle()
        module.cycle()
    return output