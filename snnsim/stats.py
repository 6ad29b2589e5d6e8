"""Statistics counters of the hardware components and their JSON-like dump."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, TextIO

from .types import IND_SIZE, Dataflow


def indent(level: int) -> str:
    """Whitespace used to indent a line by ``level`` columns."""
    return " " * level


def _format(value: object) -> str:
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def _write_lines(out: TextIO, level: int, items: Iterable[tuple[str, object]], last_comma: bool = False) -> None:
    items = list(items)
    pad = indent(level)
    for position, (label, value) in enumerate(items):
        comma = "," if position < len(items) - 1 or last_comma else ""
        out.write(f'{pad}"{label}" : {_format(value)}{comma}\n')


def _write_array(out: TextIO, level: int, label: str, values: list, last: bool) -> None:
    pad = indent(level)
    inner = indent(level + IND_SIZE)
    out.write(f'{pad}"{label}" : [\n')
    for position, value in enumerate(values):
        sep = "\n" if position == len(values) - 1 else ",\n"
        out.write(f"{inner}{_format(value)}{sep}")
    out.write(f"{pad}]\n" if last else f"{pad}],\n")


def _zero(obj: object, names: Iterable[str]) -> None:
    for name in names:
        setattr(obj, name, 0)


@dataclass
class ConnectionStats:
    n_sends: int = 0
    n_receives: int = 0

    def reset(self) -> None:
        _zero(self, ("n_sends", "n_receives"))

    def write(self, out: TextIO, indent: int) -> None:
        """Connections report through energy counters; nothing is written here."""
        return None


@dataclass
class FifoStats:
    n_pops: int = 0
    n_pushes: int = 0
    n_fronts: int = 0
    max_occupancy: int = 0

    def reset(self) -> None:
        _zero(self, ("n_pops", "n_pushes", "n_fronts", "max_occupancy"))

    def write(self, out: TextIO, indent: int) -> None:
        _write_lines(out, indent, [
            ("N_pops", self.n_pops),
            ("N_pushes", self.n_pushes),
            ("N_fronts", self.n_fronts),
            ("Max_occupancy", self.max_occupancy),
        ])


@dataclass
class DSwitchStats:
    total_cycles: int = 0
    n_broadcasts: int = 0
    n_unicasts: int = 0
    n_left_sends: int = 0
    n_right_sends: int = 0

    def reset(self) -> None:
        _zero(self, ("total_cycles", "n_broadcasts", "n_unicasts", "n_left_sends", "n_right_sends"))

    def write(self, out: TextIO, indent: int) -> None:
        idle = self.total_cycles - (self.n_broadcasts + self.n_unicasts)
        _write_lines(out, indent, [
            ("Total_cycles", self.total_cycles),
            ("Idle_cycles", idle),
            ("N_broadcasts", self.n_broadcasts),
            ("N_unicasts", self.n_unicasts),
            ("N_left_sends", self.n_left_sends),
            ("N_right_sends", self.n_right_sends),
        ])


@dataclass
class MSwitchStats:
    total_cycles: int = 0
    n_multiplications: int = 0
    n_input_forwardings_send: int = 0
    n_input_forwardings_receive: int = 0
    n_inputs_receive: int = 0
    n_weights_receive: int = 0
    n_weight_fifo_flush: int = 0
    n_psums_receive: int = 0
    n_psum_forwarding_send: int = 0
    n_configurations: int = 0

    def reset(self) -> None:
        _zero(self, (
            "total_cycles", "n_multiplications", "n_input_forwardings_send",
            "n_input_forwardings_receive", "n_inputs_receive", "n_weights_receive",
            "n_weight_fifo_flush", "n_psums_receive", "n_psum_forwarding_send",
            "n_configurations",
        ))

    def write(self, out: TextIO, indent: int) -> None:
        idle = self.total_cycles - (self.n_multiplications + self.n_psum_forwarding_send)
        _write_lines(out, indent, [
            ("Total_cycles", self.total_cycles),
            ("Idle_cycles", idle),
            ("N_multiplications", self.n_multiplications),
            ("N_input_forwardings_send", self.n_input_forwardings_send),
            ("N_input_forwardings_receive", self.n_input_forwardings_receive),
            ("N_inputs_receive_from_memory", self.n_inputs_receive),
            ("N_weights_receive_from_memory", self.n_weights_receive),
            ("N_weight_fifo_flush", self.n_weight_fifo_flush),
            ("N_psums_receive", self.n_psums_receive),
            ("N_psum_forwarding_send", self.n_psum_forwarding_send),
            ("N_configurations", self.n_configurations),
        ])


@dataclass
class MultiplierOSStats:
    total_cycles: int = 0
    n_multiplications: int = 0
    n_bottom_forwardings_send: int = 0
    n_top_forwardings_receive: int = 0
    n_right_forwardings_send: int = 0
    n_left_forwardings_receive: int = 0
    n_configurations: int = 0

    def reset(self) -> None:
        _zero(self, (
            "total_cycles", "n_multiplications", "n_bottom_forwardings_send",
            "n_top_forwardings_receive", "n_right_forwardings_send",
            "n_left_forwardings_receive", "n_configurations",
        ))

    def write(self, out: TextIO, indent: int) -> None:
        idle = self.total_cycles - self.n_multiplications
        _write_lines(out, indent, [
            ("Total_cycles", self.total_cycles),
            ("Idle_cycles", idle),
            ("N_multiplications", self.n_multiplications),
            ("N_bottom_forwardings_send", self.n_bottom_forwardings_send),
            ("N_top_forwardings_receive", self.n_top_forwardings_receive),
            ("N_right_forwardings_send", self.n_right_forwardings_send),
            ("N_left_forwardings_receive", self.n_left_forwardings_receive),
            ("N_configurations", self.n_configurations),
        ])


@dataclass
class ASwitchStats:
    total_cycles: int = 0
    n_2_1_sums: int = 0
    n_2_1_comps: int = 0
    n_3_1_sums: int = 0
    n_3_1_comps: int = 0
    n_parent_send: int = 0
    n_augmented_link_send: int = 0
    n_memory_send: int = 0
    n_configurations: int = 0

    def reset(self) -> None:
        _zero(self, (
            "total_cycles", "n_2_1_sums", "n_2_1_comps", "n_3_1_sums", "n_3_1_comps",
            "n_parent_send", "n_augmented_link_send", "n_memory_send", "n_configurations",
        ))

    def write(self, out: TextIO, indent: int) -> None:
        idle = self.total_cycles - (
            self.n_2_1_sums + self.n_2_1_comps + self.n_3_1_sums + self.n_3_1_comps
        )
        _write_lines(out, indent, [
            ("Total_cycles", self.total_cycles),
            ("Idle_cycles", idle),
            ("N_2_1_sums", self.n_2_1_sums),
            ("N_2_1_comps", self.n_2_1_comps),
            ("N_3_1_sums", self.n_3_1_sums),
            ("N_3_1_comps", self.n_3_1_comps),
            ("N_parent_send", self.n_parent_send),
            ("N_augmentendLink_send", self.n_augmented_link_send),
            ("N_memory_send", self.n_memory_send),
            ("N_configurations", self.n_configurations),
        ])


@dataclass
class AccumulatorStats:
    total_cycles: int = 0
    n_adds: int = 0
    n_memory_send: int = 0
    n_receives: int = 0
    n_register_reads: int = 0
    n_register_writes: int = 0
    n_configurations: int = 0

    def reset(self) -> None:
        _zero(self, (
            "total_cycles", "n_adds", "n_memory_send", "n_receives",
            "n_register_reads", "n_register_writes", "n_configurations",
        ))

    def write(self, out: TextIO, indent: int) -> None:
        _write_lines(out, indent, [
            ("Total_cycles", self.total_cycles),
            ("N_adds", self.n_adds),
            ("N_memory_send", self.n_memory_send),
            ("N_receives", self.n_receives),
            ("N_register_reads", self.n_register_reads),
            ("N_register_writes", self.n_register_writes),
            ("N_configurations", self.n_configurations),
        ])


@dataclass
class SDMemoryStats:
    total_cycles: int = 0
    n_sram_weight_reads: int = 0
    n_sram_input_reads: int = 0
    n_sram_psum_reads: int = 0
    n_sram_psum_writes: int = 0
    sta_sparsity: float = 0.0
    str_sparsity: float = 0.0
    dataflow: Dataflow = Dataflow.CNN_DATAFLOW
    n_sta_vectors_at_once_avg: float = 0.0
    n_sta_vectors_at_once_max: int = 0
    n_reconfigurations: int = 0
    n_sram_read_ports_weights_use: list[int] = field(default_factory=list)
    n_sram_read_ports_inputs_use: list[int] = field(default_factory=list)
    n_sram_read_ports_psums_use: list[int] = field(default_factory=list)
    n_sram_write_ports_use: list[int] = field(default_factory=list)

    def reset(self) -> None:
        """Clear the counters; the per-port arrays are kept."""
        _zero(self, (
            "total_cycles", "n_sram_weight_reads", "n_sram_input_reads",
            "n_sram_psum_reads", "n_sram_psum_writes", "n_sta_vectors_at_once_max",
            "n_reconfigurations",
        ))
        self.sta_sparsity = 0.0
        self.str_sparsity = 0.0
        self.n_sta_vectors_at_once_avg = 0.0
        self.dataflow = Dataflow.CNN_DATAFLOW

    def write(self, out: TextIO, indent: int) -> None:
        _write_lines(out, indent, [
            ("Total_cycles", self.total_cycles),
            ("N_SRAM_weight_reads", self.n_sram_weight_reads),
            ("N_SRAM_input_reads", self.n_sram_input_reads),
            ("N_SRAM_psum_reads", self.n_sram_psum_reads),
            ("N_SRAM_psum_writes", self.n_sram_psum_writes),
            ("Dataflow", f'"{self.dataflow.name}"'),
            ("STA_sparsity", self.sta_sparsity),
            ("STR_sparsity", self.str_sparsity),
            ("STA_vectors_at_once_avg", self.n_sta_vectors_at_once_avg),
            ("STA_vectors_at_once_max", self.n_sta_vectors_at_once_max),
            ("N_reconfigurations", self.n_reconfigurations),
        ], last_comma=True)
        _write_array(out, indent, "N_SRAM_read_ports_weights_use", self.n_sram_read_ports_weights_use, False)
        _write_array(out, indent, "N_SRAM_read_ports_inputs_use", self.n_sram_read_ports_inputs_use, False)
        _write_array(out, indent, "N_SRAM_read_ports_psums_use", self.n_sram_read_ports_psums_use, False)
        _write_array(out, indent, "N_SRAM_write_ports_use", self.n_sram_write_ports_use, True)


@dataclass
class CollectionBusLineStats:
    total_cycles: int = 0
    n_times_conflicts: int = 0
    n_conflicts_average: int = 0
    n_sends: int = 0
    n_inputs_receive: list[int] = field(default_factory=list)

    def reset(self) -> None:
        """Clear the counters; the per-input array is kept."""
        _zero(self, ("total_cycles", "n_times_conflicts", "n_conflicts_average", "n_sends"))

    def write(self, out: TextIO, indent: int) -> None:
        """Write the stats; the conflict sum is turned into a per-cycle average first."""
        if self.total_cycles > 0:
            self.n_conflicts_average = int(self.n_conflicts_average // self.total_cycles)
        _write_lines(out, indent, [
            ("Total_cycles", self.total_cycles),
            ("N_Times_conflicts", self.n_times_conflicts),
            ("N_Conflicts_Average", self.n_conflicts_average),
            ("N_sends", self.n_sends),
        ], last_comma=True)
        _write_array(out, indent, "n_inputs_receive", self.n_inputs_receive, True)