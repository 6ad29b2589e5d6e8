"""Output-stationary memory controller that drives the multiplier mesh over timesteps."""

from __future__ import annotations

import logging
from typing import Iterable, MutableSequence, Protocol, Sequence, TextIO

from .packets import Connection, DataPackage
from .ports import MemoryPorts
from .stats import SDMemoryStats
from .stats import indent as pad
from .tile import Tile
from .types import IND_SIZE, Dataflow, OperandType, OSMeshControllerState, TrafficType

logger = logging.getLogger(__name__)

_WORD_BYTES = 4
_PROGRESS_STEP = 2000


class _MultiplierNetwork(Protocol):
    def reset_signals(self) -> None: ...

    def configure_signals(self, tile: Tile, ms_rows: int, ms_cols: int) -> None: ...


class _ReduceNetwork(Protocol):
    def reset_signals(self) -> None: ...

    def configure_signals(self, tile: Tile, ms_size: int, n_folding: int) -> None: ...


def _ceil_div(a: int, b: int) -> int:
    return -(-a // b)


class OSMeshSDMemory:
    """Streams an M x K by K x N product through the mesh, one timestep after another.

    Spikes and membrane potentials coming back are written to ``output_address``
    and ``neuron_state``. The multiplier and reduce networks are reconfigured at
    the start of every tile when they have been attached.
    """

    def __init__(
        self,
        ms_rows: int,
        ms_cols: int,
        n_read_ports: int,
        n_write_ports: int = 1,
        write_buffer_capacity: int = 1,
        port_width: int = 1,
        timestamp: int = 1,
        name: str = "OSMeshSDMemory",
    ) -> None:
        self.name = name
        self.ms_rows = ms_rows
        self.ms_cols = ms_cols
        self.stats = SDMemoryStats()
        self.ports = MemoryPorts(
            ms_rows, ms_cols, n_read_ports, n_write_ports,
            write_buffer_capacity, port_width, self.stats,
        )

        self.multiplier_network: _MultiplierNetwork | None = None
        self.reduce_network: _ReduceNetwork | None = None
        self.pooling_enabled = False

        self.layer_loaded = False
        self.tile_loaded = False
        self.execution_finished = False
        self.iteration_completed = False
        self.current_state = OSMeshControllerState.CONFIGURING
        self.local_cycle = 0

        self.m = self.k = self.n = 0
        self.mk_address: Sequence[int] = ()
        self.kn_address: Sequence[int] = ()
        self.output_address: MutableSequence[int] = []
        self.neuron_state: MutableSequence[int] = []
        self.output_size = 0

        self.t_m = self.t_n = self.t_k = 0
        self.iter_m = self.iter_n = self.iter_k = 0
        self.iter_timestamp = timestamp
        self.vnat_table: list[int] = []

        self.current_m = self.current_n = self.current_k = 0
        self.current_timestamp = 0
        self.rows_used = self.cols_used = 0

        self.current_output = 0
        self.current_output_iteration = 0
        self.current_progress = 0
        self.n_iterations_completed = 0
        self.n_timestamp_completed = 0
        self.all_timestamp_required_output = 0
        self.one_timestamp_required_output = 0
        self.one_pe_required_output = 0
        self._sizes_logged = False

    def set_layer(
        self,
        m: int,
        k: int,
        n: int,
        mk_address: Sequence[int],
        kn_address: Sequence[int],
        output_address: MutableSequence[int],
        neuron_state: MutableSequence[int],
        dataflow: Dataflow,
    ) -> None:
        """Load the GEMM shape and the memory areas it reads from and writes to."""
        self.m, self.k, self.n = m, k, n
        self.mk_address = mk_address
        self.kn_address = kn_address
        self.output_address = output_address
        self.neuron_state = neuron_state
        self.stats.dataflow = dataflow
        self.output_size = m * n
        self.layer_loaded = True

    def set_tile(self, tile: Tile) -> None:
        """Take T_M from the tile's output rows and T_N from its filters."""
        if not self.layer_loaded:
            raise RuntimeError("a layer must be loaded before its tile")
        self.t_m = tile.t_x_
        self.t_n = tile.t_k
        if self.t_m < 1 or self.t_n < 1:
            raise ValueError("tile dimensions must be positive")
        self.t_k = 1
        self.iter_m = _ceil_div(self.m, self.t_m)
        self.iter_k = self.k
        self.iter_n = _ceil_div(self.n, self.t_n)
        self.vnat_table.extend([0] * (self.t_n * self.t_m))
        self.tile_loaded = True

    def set_write_connections(self, connections: Iterable[Connection]) -> None:
        self.ports.set_write_connections(connections)

    def set_multiplier_network(self, network: _MultiplierNetwork) -> None:
        self.multiplier_network = network

    def set_reduce_network(self, network: _ReduceNetwork) -> None:
        self.reduce_network = network

    def is_execution_finished(self) -> bool:
        return self.execution_finished

    def reset(self) -> None:
        """Prepare for another run over the same layer."""
        self.execution_finished = False
        self.current_progress = 0
        self.current_state = OSMeshControllerState.CONFIGURING
        self.current_timestamp = 0

    def _configure(self) -> None:
        self.stats.n_reconfigurations += 1
        remaining_m = self.m - self.current_m * self.t_m
        remaining_n = self.n - self.current_n * self.t_n
        self.cols_used = min(remaining_n, self.t_n)
        self.rows_used = min(remaining_m, self.t_m)
        tile = Tile(1, 1, 1, self.cols_used, 1, 1, self.rows_used, 1, False)
        if self.multiplier_network is not None:
            self.multiplier_network.reset_signals()
        if self.reduce_network is not None:
            self.reduce_network.reset_signals()
        if self.multiplier_network is not None:
            self.multiplier_network.configure_signals(tile, self.ms_rows, self.ms_cols)
        if self.reduce_network is not None:
            self.reduce_network.configure_signals(tile, self.ms_rows * self.ms_cols, self.iter_k)
        self.iteration_completed = False

        mn = self.m * self.n
        pe = self.rows_used * self.cols_used
        if self.pooling_enabled:
            self.all_timestamp_required_output = (
                self.iter_timestamp * mn + self.iter_timestamp * mn // 4
            )
            self.one_timestamp_required_output = mn + mn // 4
            self.one_pe_required_output = pe + pe // 4
            if not self._sizes_logged:
                logger.info(
                    "M=%d N=%d T=%d outputs required=%d",
                    self.m, self.n, self.iter_timestamp, self.all_timestamp_required_output,
                )
                self._sizes_logged = True
        else:
            self.all_timestamp_required_output = self.iter_timestamp * 2 * mn
            self.one_timestamp_required_output = 2 * mn
            self.one_pe_required_output = 2 * pe

    def _distribute(self) -> None:
        index_n = self.current_n * self.t_n
        for i in range(self.cols_used):
            data = self.kn_address[(index_n + i) * self.k + self.current_k]
            self.stats.n_sram_weight_reads += 1
            self.ports.route(DataPackage(
                size_package=_WORD_BYTES, data=data, data_type=OperandType.WEIGHT,
                source=0, traffic_type=TrafficType.UNICAST, unicast_dest=i,
            ))
        index_m = self.current_m * self.t_m
        base = self.current_timestamp * self.m * self.k
        for i in range(self.rows_used):
            data = self.mk_address[base + (index_m + i) * self.k + self.current_k]
            self.stats.n_sram_input_reads += 1
            self.ports.route(DataPackage(
                size_package=_WORD_BYTES, data=data, data_type=OperandType.IACTIVATION,
                source=0, traffic_type=TrafficType.UNICAST, unicast_dest=i + self.ms_cols,
            ))

        self.current_k += 1
        if self.current_k == self.iter_k:
            self.current_k = 0
            self.current_n += 1
            self.iteration_completed = True
            if self.current_n == self.iter_n:
                self.current_n = 0
                self.current_m += 1
                if self.current_m == self.iter_m:
                    self.current_m = 0
                    self.current_timestamp += 1

    def _store(self, package: DataPackage) -> None:
        vn = package.vn
        data = package.data
        self.stats.n_sram_psum_writes += 1
        tile_m_pointer = (self.n_iterations_completed // self.iter_n) * self.ms_rows
        vn_m, vn_n = divmod(vn, self.cols_used)
        row = tile_m_pointer + vn_m
        timestamp_offset = self.n_timestamp_completed * self.m * self.n
        timestamp_offset_pooling = self.n_timestamp_completed * self.m * self.n // 4
        addr_offset = row * self.n + vn_n
        addr_pooling = (row // 2) * self.n // 2 + vn_n // 2
        self.vnat_table[vn] += 1

        if package.data_type is OperandType.VTH:
            self.neuron_state[addr_offset] = data
        elif package.data_type is OperandType.SPIKE:
            if self.pooling_enabled:
                self.output_address[addr_pooling + timestamp_offset_pooling] = data
            else:
                self.output_address[timestamp_offset + addr_offset] = data
        else:
            raise ValueError(f"cannot store a {package.data_type.name} package in memory")

        self.current_progress += 1
        self.current_output += 1
        self.current_output_iteration += 1

        if self.current_progress % _PROGRESS_STEP == 0:
            logger.info(
                "Output completed %d/%d", self.current_progress, self.all_timestamp_required_output
            )
        if self.current_progress == self.all_timestamp_required_output:
            self.execution_finished = True

        if self.current_output_iteration == self.one_pe_required_output:
            self.current_output_iteration = 0
            self.n_iterations_completed += 1
            if self.current_state is OSMeshControllerState.WAITING_FOR_NEXT_ITER:
                self.iteration_completed = True

    def _transition(self) -> None:
        state = self.current_state
        if state is OSMeshControllerState.CONFIGURING:
            self.current_state = OSMeshControllerState.DIST_INPUTS
        elif state is OSMeshControllerState.DIST_INPUTS:
            if self.iteration_completed:
                if self.current_timestamp >= self.iter_timestamp:
                    self.current_state = OSMeshControllerState.ALL_DATA_SENT
                else:
                    self.current_state = OSMeshControllerState.WAITING_FOR_NEXT_ITER
                    self.iteration_completed = False
        elif state is OSMeshControllerState.WAITING_FOR_NEXT_ITER:
            if self.iteration_completed:
                self.current_state = OSMeshControllerState.CONFIGURING

    def cycle(self) -> None:
        """Advance the controller by one clock cycle."""
        if not self.layer_loaded:
            raise RuntimeError("no layer has been loaded into the memory controller")
        if not self.tile_loaded:
            raise RuntimeError("no tile has been loaded into the memory controller")
        self.local_cycle += 1
        self.stats.total_cycles += 1

        if self.current_state is OSMeshControllerState.CONFIGURING:
            self._configure()
        if self.current_state is OSMeshControllerState.DIST_INPUTS:
            self._distribute()

        self.ports.receive()
        fifo = self.ports.write_fifo
        for _ in range(len(fifo)):
            self._store(fifo.pop())

        self._transition()
        self.ports.send()

    def write_stats(self, out: TextIO, indent: int) -> None:
        out.write(f'{pad(indent)}"SDMemoryStats" : {{\n')
        self.stats.write(out, indent + IND_SIZE)
        out.write(f"{pad(indent)}}}")

    def write_energy(self, out: TextIO, indent: int) -> None:
        """Write the global-buffer read and write counters."""
        reads = (
            self.stats.n_sram_weight_reads
            + self.stats.n_sram_input_reads
            + self.stats.n_sram_psum_reads
        )
        writes = self.stats.n_sram_psum_writes
        out.write(f"{pad(indent)}GLOBALBUFFER READ={reads}")
        out.write(f"{pad(indent)} WRITE={writes}\n")