import pytest

from snnsim.packets import Connection, PoolingPackage
from snnsim.pooling import PoolingMemory, PoolingModule, PoolingUnit, run_pooling
from snnsim.types import PoolingMemoryControllerState


def test_unit_emits_or_of_window_after_two_pairs():
    out = Connection()
    unit = PoolingUnit(3, out)
    unit.input_fifo.push(PoolingPackage(channel=1, retrieve=2, values=(False, False)))
    unit.cycle()
    assert not out.has_pending_data()
    unit.input_fifo.push(PoolingPackage(channel=1, retrieve=2, values=(False, True)))
    unit.cycle()
    [result] = out.receive()
    assert result.result is True
    assert (result.channel, result.retrieve, result.location) == (1, 2, 3)


def test_unit_resets_after_window():
    out = Connection()
    unit = PoolingUnit(0, out)
    for values in ((True, False), (False, False), (False, False), (False, False)):
        unit.input_fifo.push(PoolingPackage(channel=0, retrieve=0, values=values))
        unit.cycle()
    [result] = out.receive()
    assert result.result is False
    assert unit.current_num == 0


def test_unit_rejects_wrong_pair_size():
    unit = PoolingUnit(0, Connection())
    unit.input_fifo.push(PoolingPackage(channel=0, retrieve=0, values=(True,)))
    with pytest.raises(ValueError):
        unit.cycle()


def test_module_splits_row_into_pairs():
    module = PoolingModule(4)
    module.input_connection.send([PoolingPackage(channel=0, retrieve=0, values=(True, False, False, True))])
    module.receive()
    assert module.units[0].input_fifo.front().values == (True, False)
    assert module.units[1].input_fifo.front().values == (False, True)


def test_module_rejects_two_packages():
    module = PoolingModule(4)
    package = PoolingPackage(channel=0, retrieve=0, values=(True, True))
    module.input_connection.send([package, package])
    with pytest.raises(ValueError):
        module.receive()


def test_module_output_connections_match_units():
    module = PoolingModule(6)
    outputs = module.output_connections()
    assert sorted(outputs) == [0, 1, 2]
    assert all(outputs[i] is unit.output_connection for i, unit in enumerate(module.units))


def test_memory_cycle_without_layer_raises():
    memory = PoolingMemory(4)
    memory.connect(PoolingModule(4))
    with pytest.raises(RuntimeError):
        memory.cycle()


def test_memory_connect_mismatch_raises():
    with pytest.raises(ValueError):
        PoolingMemory(4).connect(PoolingModule(8))


def test_memory_state_progression():
    memory = PoolingMemory(4)
    module = PoolingModule(4)
    memory.connect(module)
    memory.set_layer(4, 1, [0] * 8, [0, 0])
    memory.cycle()
    assert memory.current_state is PoolingMemoryControllerState.DATA_DIST
    assert memory.required_output == 2
    memory.cycle()
    memory.cycle()
    assert memory.current_state is PoolingMemoryControllerState.ALL_DATA_SENT


def test_all_zero_input_gives_zero_output():
    assert run_pooling(4, 4, 8, 2, [0] * 32) == [0] * 8


def test_all_one_input_gives_one_output():
    assert run_pooling(4, 4, 8, 3, [1] * 48) == [1] * 12


def test_worked_example_single_channel():
    data = [1, 0, 0, 0,
            0, 0, 0, 1]
    assert run_pooling(4, 4, 4, 1, data) == [1, 1]


def test_worked_example_two_channels_partial_fetch():
    data = [0, 0, 0, 0, 0, 0,
            0, 0, 0, 0, 1, 0,
            0, 0, 0, 0, 0, 0,
            0, 1, 0, 0, 0, 0]
    assert run_pooling(4, 4, 6, 2, data) == [0, 0, 1, 1, 0, 0]


@pytest.mark.parametrize("position", range(8))
def test_single_spike_sets_exactly_one_output(position):
    data = [0] * 16
    data[position] = 1
    out = run_pooling(2, 2, 8, 1, data)
    assert sum(out) == 1


def test_run_pooling_validates_arguments():
    with pytest.raises(ValueError):
        run_pooling(3, 3, 4, 1, [0] * 8)
    with pytest.raises(ValueError):
        run_pooling(4, 4, 4, 0, [])
    with pytest.raises(ValueError):
        run_pooling(4, 4, 4, 1, [0] * 7)
    with pytest.raises(ValueError):
        run_pooling(4, 8, 4, 1, [0] * 8)