import io

from snnsim.stats import (
    AccumulatorStats,
    ASwitchStats,
    CollectionBusLineStats,
    ConnectionStats,
    DSwitchStats,
    FifoStats,
    MSwitchStats,
    MultiplierOSStats,
    SDMemoryStats,
    indent,
)
from snnsim.types import Dataflow


def _dump(stats, level=4):
    out = io.StringIO()
    stats.write(out, level)
    return out.getvalue().splitlines()


def test_indent_width():
    assert indent(4) == "    "
    assert indent(0) == ""


def test_connection_stats_write_nothing():
    stats = ConnectionStats(n_sends=3, n_receives=2)
    assert _dump(stats) == []
    stats.reset()
    assert (stats.n_sends, stats.n_receives) == (0, 0)


def test_fifo_stats_format():
    stats = FifoStats(n_pops=3, n_pushes=5, n_fronts=1, max_occupancy=2)
    lines = _dump(stats)
    assert lines[0] == '    "N_pops" : 3,'
    assert lines[-1] == '    "Max_occupancy" : 2'
    assert len(lines) == 4


def test_fifo_stats_reset():
    stats = FifoStats(n_pops=3, n_pushes=5, n_fronts=1, max_occupancy=2)
    stats.reset()
    assert stats == FifoStats()


def test_multiplier_os_idle_cycles():
    stats = MultiplierOSStats(total_cycles=10, n_multiplications=4)
    lines = _dump(stats, 0)
    assert '"Idle_cycles" : 6,' in lines
    assert lines[-1] == '"N_configurations" : 0'


def test_only_last_line_lacks_comma():
    for stats in (DSwitchStats(), MSwitchStats(), ASwitchStats(), AccumulatorStats(), MultiplierOSStats()):
        lines = _dump(stats)
        assert all(line.endswith(",") for line in lines[:-1])
        assert not lines[-1].endswith(",")


def test_aswitch_label_spelling_and_reset():
    stats = ASwitchStats(total_cycles=9, n_augmented_link_send=7)
    assert '    "N_augmentendLink_send" : 7,' in _dump(stats)
    stats.reset()
    assert stats == ASwitchStats()


def test_sdmemory_stats_arrays_and_dataflow():
    stats = SDMemoryStats(
        n_sram_weight_reads=11,
        n_sram_read_ports_weights_use=[1, 2],
        n_sram_write_ports_use=[5],
    )
    lines = _dump(stats, 0)
    assert '"N_SRAM_weight_reads" : 11,' in lines
    assert '"Dataflow" : "CNN_DATAFLOW",' in lines
    assert '"STA_sparsity" : 0,' in lines
    start = lines.index('"N_SRAM_read_ports_weights_use" : [')
    assert lines[start + 1:start + 4] == ["    1,", "    2", "],"]
    assert lines[-3:] == ['"N_SRAM_write_ports_use" : [', "    5", "]"]


def test_sdmemory_reset_keeps_port_arrays():
    stats = SDMemoryStats(total_cycles=8, dataflow=Dataflow.MK_STA_KN_STR, n_sram_write_ports_use=[4])
    stats.reset()
    assert stats.total_cycles == 0
    assert stats.dataflow is Dataflow.CNN_DATAFLOW
    assert stats.n_sram_write_ports_use == [4]


def test_collection_bus_average_and_array():
    stats = CollectionBusLineStats(total_cycles=4, n_conflicts_average=10, n_inputs_receive=[3, 4])
    lines = _dump(stats, 0)
    assert '"N_Conflicts_Average" : 2,' in lines
    assert stats.n_conflicts_average == 2
    assert lines[-4:] == ['"n_inputs_receive" : [', "    3,", "    4", "]"]


def test_collection_bus_zero_cycles_keeps_sum():
    stats = CollectionBusLineStats(total_cycles=0, n_conflicts_average=10)
    _dump(stats)
    assert stats.n_conflicts_average == 10
    stats.reset()
    assert stats.n_conflicts_average == 0