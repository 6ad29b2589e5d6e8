import pytest

from snnsim.packets import Connection, DataPackage
from snnsim.ports import MemoryPorts
from snnsim.types import OperandType, TrafficType


def make_ports(n_read_ports=4):
    return MemoryPorts(ms_rows=2, ms_cols=2, n_read_ports=n_read_ports,
                       n_write_ports=2, write_buffer_capacity=8, port_width=16)


def test_read_connections_one_per_port():
    ports = make_ports()
    conns = ports.read_connections()
    assert sorted(conns) == [0, 1, 2, 3]
    assert all(isinstance(c, Connection) for c in conns.values())


def test_unicast_goes_to_single_port_with_local_destination():
    ports = MemoryPorts(ms_rows=2, ms_cols=2, n_read_ports=2)
    pkg = DataPackage(data=7, data_type=OperandType.IACTIVATION,
                      traffic_type=TrafficType.UNICAST, unicast_dest=3, iteration_k=5)
    ports.route(pkg)
    assert ports.input_fifos[0].is_empty()
    assert len(ports.input_fifos[1]) == 1
    routed = ports.input_fifos[1].front()
    assert routed.unicast_dest == 1
    assert routed.source == 1
    assert routed.iteration_k == 5
    assert routed.data == 7


def test_unicast_out_of_range_raises():
    ports = make_ports()
    pkg = DataPackage(data=1, traffic_type=TrafficType.UNICAST, unicast_dest=4)
    with pytest.raises(ValueError):
        ports.route(pkg)


def test_broadcast_reaches_every_port():
    ports = make_ports()
    pkg = DataPackage(data=9, data_type=OperandType.WEIGHT,
                      traffic_type=TrafficType.BROADCAST)
    ports.route(pkg)
    assert [len(f) for f in ports.input_fifos] == [1, 1, 1, 1]
    assert [f.front().source for f in ports.input_fifos] == [0, 1, 2, 3]
    assert all(f.front().is_broadcast for f in ports.input_fifos)


def test_multicast_only_ports_with_receivers():
    ports = MemoryPorts(ms_rows=2, ms_cols=2, n_read_ports=2)
    pkg = DataPackage(data=3, traffic_type=TrafficType.MULTICAST,
                      dests=(False, False, True, False))
    ports.route(pkg)
    assert ports.input_fifos[0].is_empty()
    assert ports.input_fifos[1].front().dests == (True, False)
    assert ports.input_fifos[1].front().is_multicast


def test_multicast_with_short_destination_list_raises():
    ports = make_ports()
    pkg = DataPackage(traffic_type=TrafficType.MULTICAST, dests=(True,))
    with pytest.raises(ValueError):
        ports.route(pkg)


def test_psums_are_sent_before_inputs():
    ports = MemoryPorts(ms_rows=1, ms_cols=1, n_read_ports=1)
    ports.route(DataPackage(data=1, data_type=OperandType.IACTIVATION,
                            traffic_type=TrafficType.UNICAST, unicast_dest=0))
    ports.route(DataPackage(data=2, data_type=OperandType.PSUM,
                            traffic_type=TrafficType.UNICAST, unicast_dest=0))
    wire = ports.read_connections()[0]
    ports.send()
    first = wire.receive()
    ports.send()
    second = wire.receive()
    assert [p.data for p in first] == [2]
    assert [p.data for p in second] == [1]
    assert ports.stats.n_sram_read_ports_psums_use == [1]
    assert ports.stats.n_sram_read_ports_inputs_use == [1]


def test_send_counts_weights_per_port():
    ports = make_ports()
    ports.route(DataPackage(data=4, data_type=OperandType.WEIGHT,
                            traffic_type=TrafficType.UNICAST, unicast_dest=2))
    ports.send()
    assert ports.stats.n_sram_read_ports_weights_use == [0, 0, 1, 0]
    assert ports.input_fifos[2].is_empty()
    assert ports.read_connections()[2].receive()[0].data == 4


def test_send_with_nothing_queued_sends_nothing():
    ports = make_ports()
    ports.send()
    assert not any(c.has_pending_data() for c in ports.read_connections().values())


def test_receive_collects_from_write_connections():
    ports = make_ports()
    a, b = Connection(), Connection()
    ports.set_write_connections([a, b])
    pa = DataPackage(data=1, data_type=OperandType.SPIKE)
    pb = DataPackage(data=0, data_type=OperandType.VTH)
    a.send([pa])
    b.send([pb])
    received = ports.receive()
    assert received == [pa, pb]
    assert len(ports.write_fifo) == 2
    assert ports.write_fifo.pop() is pa
    assert not a.has_pending_data()


def test_invalid_port_count_raises():
    with pytest.raises(ValueError):
        MemoryPorts(ms_rows=2, ms_cols=2, n_read_ports=0)
    with pytest.raises(ValueError):
        MemoryPorts(ms_rows=1, ms_cols=1, n_read_ports=3)


def test_stats_arrays_sized_by_ports():
    ports = make_ports()
    assert len(ports.stats.n_sram_read_ports_weights_use) == ports.n_read_ports
    assert len(ports.stats.n_sram_write_ports_use) == ports.n_write_ports