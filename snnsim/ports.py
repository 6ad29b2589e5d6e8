"""Read and write ports of the on-chip memory: routing, per-port FIFOs and wires."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from .packets import Connection, DataPackage, Fifo
from .stats import SDMemoryStats
from .types import OperandType, TrafficType


class MemoryPorts:
    """Routes packages to read-port FIFOs, drives the read wires and collects writes.

    The multipliers fed by the memory (``ms_rows + ms_cols`` of them) are split
    evenly among the read ports; a package addressed to multiplier ``d`` goes to
    port ``d // per_port`` with local destination ``d % per_port``.
    """

    def __init__(
        self,
        ms_rows: int,
        ms_cols: int,
        n_read_ports: int,
        n_write_ports: int = 1,
        write_buffer_capacity: int = 1,
        port_width: int = 1,
        stats: SDMemoryStats | None = None,
    ) -> None:
        if n_read_ports < 1:
            raise ValueError("at least one read port is needed")
        if n_write_ports < 0:
            raise ValueError("the number of write ports cannot be negative")
        self.ms_rows = ms_rows
        self.ms_cols = ms_cols
        self.n_read_ports = n_read_ports
        self.n_write_ports = n_write_ports
        self.port_width = port_width
        self.ms_size_per_input_port = (ms_rows + ms_cols) // n_read_ports
        if self.ms_size_per_input_port < 1:
            raise ValueError("more read ports than multipliers to feed")

        self.stats = stats if stats is not None else SDMemoryStats()
        self.stats.n_sram_read_ports_weights_use = [0] * n_read_ports
        self.stats.n_sram_read_ports_inputs_use = [0] * n_read_ports
        self.stats.n_sram_read_ports_psums_use = [0] * n_read_ports
        self.stats.n_sram_write_ports_use = [0] * n_write_ports

        self._read_connections = {i: Connection(port_width) for i in range(n_read_ports)}
        self.input_fifos: list[Fifo[DataPackage]] = [
            Fifo(write_buffer_capacity) for _ in range(n_read_ports)
        ]
        self.psum_fifos: list[Fifo[DataPackage]] = [
            Fifo(write_buffer_capacity) for _ in range(n_read_ports)
        ]
        self.write_fifo: Fifo[DataPackage] = Fifo(write_buffer_capacity)
        self._write_connections: list[Connection] = []

    def read_connections(self) -> dict[int, Connection]:
        """The wires leaving each read port, keyed by port number."""
        return dict(self._read_connections)

    def set_write_connections(self, connections: Iterable[Connection]) -> None:
        """Attach all the wires that bring results back to memory."""
        self._write_connections = list(connections)

    def _enqueue(self, port: int, original: DataPackage, package: DataPackage) -> None:
        if original.data_type is OperandType.PSUM:
            self.psum_fifos[port].push(package)
        else:
            package.iteration_k = original.iteration_k
            self.input_fifos[port].push(package)

    def route(self, package: DataPackage) -> None:
        """Put replicas of ``package`` into the FIFOs of the ports that must carry it."""
        if package.is_broadcast:
            for port in range(self.n_read_ports):
                replica = replace(
                    package, source=port, traffic_type=TrafficType.BROADCAST,
                    unicast_dest=0, dests=(),
                )
                self._enqueue(port, package, replica)
        elif package.is_unicast:
            dest = package.unicast_dest
            port, local_dest = divmod(dest, self.ms_size_per_input_port)
            if dest < 0 or port >= self.n_read_ports:
                raise ValueError(f"destination {dest} is not reachable from any read port")
            replica = replace(
                package, source=port, traffic_type=TrafficType.UNICAST,
                unicast_dest=local_dest, dests=(),
            )
            self._enqueue(port, package, replica)
        else:
            size = self.ms_size_per_input_port
            needed = size * self.n_read_ports
            dests = tuple(package.dests)
            if len(dests) < needed:
                raise ValueError(
                    f"multicast package names {len(dests)} destinations, {needed} expected"
                )
            for port in range(self.n_read_ports):
                local = dests[port * size:(port + 1) * size]
                if not any(local):
                    continue
                replica = replace(
                    package, source=port, traffic_type=TrafficType.MULTICAST,
                    unicast_dest=0, dests=local,
                )
                self._enqueue(port, package, replica)

    def send(self) -> None:
        """Send at most one package per read port, partial sums first."""
        for port, connection in self._read_connections.items():
            psums = self.psum_fifos[port]
            inputs = self.input_fifos[port]
            if not psums.is_empty():
                connection.send([psums.pop()])
                self.stats.n_sram_read_ports_psums_use[port] += 1
            elif not inputs.is_empty():
                package = inputs.front()
                if package.data_type is OperandType.WEIGHT:
                    self.stats.n_sram_read_ports_weights_use[port] += 1
                else:
                    self.stats.n_sram_read_ports_inputs_use[port] += 1
                connection.send([package])
                inputs.pop()

    def receive(self) -> list[DataPackage]:
        """Move everything pending on the write wires into the write FIFO and return it."""
        received: list[DataPackage] = []
        for connection in self._write_connections:
            if connection.has_pending_data():
                for package in connection.receive():
                    self.write_fifo.push(package)
                    received.append(package)
        return received