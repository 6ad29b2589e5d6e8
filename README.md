# snnsim

A cycle-level model of the data-movement parts of an output-stationary
spiking neural network accelerator. The package contains:

- `snnsim.types`: enumerations shared by the components (operand and traffic
  kinds, controller states, dataflows and so on), and the records
  `LayerTopology`, `PingPongBuffer` (with `switch()`) and `Record`;
- `snnsim.tile`: `Tile` (with `Tile.for_gemm`, `vn_size()` and `num_vns()`)
  and `SparseVN`;
- `snnsim.stats`: statistics counters that write themselves as JSON-like
  report fragments;
- `snnsim.packets`: `DataPackage`, `RequestPackage`, `PoolingPackage`, the
  `Fifo` queue and the `Connection` wire;
- `snnsim.pooling`: 2x2 OR-pooling of spike maps, made of `PoolingUnit`,
  `PoolingModule`, `PoolingMemory` and the helper `run_pooling`;
- `snnsim.ports`: `MemoryPorts`, the read and write ports of the global buffer;
- `snnsim.sdmemory`: `OSMeshSDMemory`, the output-stationary memory controller.

There are no third-party dependencies.

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## Pooling a spike map

Each channel is stored as two consecutive rows of `y` values. `run_pooling`
cycles the pooling memory and module until every output has been written and
returns `channels * y // 2` values: for each pair of columns, 1 if any of the
four spikes in the 2x2 window is set, else 0.

```python
from snnsim.pooling import run_pooling

spikes = [
    0, 1, 0, 0,   # channel 0, row 0
    0, 0, 0, 0,   # channel 0, row 1
]
pooled = run_pooling(ms_rows=4, ms_cols=4, y=4, channels=1, input_data=spikes)
print(pooled)  # [1, 0]
```

`run_pooling` raises `ValueError` when `ms_rows` is odd or below 2, `y` is
below 2, `channels` is below 1, or `input_data` is shorter than
`channels * 2 * y`.

## Tiles

```python
from snnsim.tile import Tile

tile = Tile.for_gemm(4, 4, 1, False)
print(tile.vn_size(), tile.num_vns())  # 1 16
```

## The memory controller

`OSMeshSDMemory` streams an M x K input matrix (one per timestep) against a
N x K weight matrix through the mesh. Each call to `cycle()` advances one
clock cycle: it configures a tile, routes one column of weights and inputs to
the read-port FIFOs of its `MemoryPorts`, sends at most one package per read
port (partial sums first), and stores every package that arrives on the write
connections. Packages of type `VTH` are written to `neuron_state`, packages of
type `SPIKE` to `output_address`; any other type raises `ValueError`.
`is_execution_finished()` becomes true once all expected outputs of all
timesteps have arrived.

```python
from snnsim.sdmemory import OSMeshSDMemory
from snnsim.tile import Tile
from snnsim.types import Dataflow

memory = OSMeshSDMemory(ms_rows=2, ms_cols=2, n_read_ports=4, timestamp=1)
memory.set_layer(2, 3, 2, inputs, weights, outputs, states, Dataflow.CNN_DATAFLOW)
memory.set_tile(Tile.for_gemm(2, 2, 1, False))
memory.cycle()
```

A multiplier network and a reduce network may be attached with
`set_multiplier_network` and `set_reduce_network`; any object with
`reset_signals()` and `configure_signals(tile, ...)` will do, and they are
reconfigured at the start of every tile. `write_stats(out, indent)` and
`write_energy(out, indent)` write the controller's counters to a text stream.
Progress messages go to the standard `logging` module.

## Statistics

Every statistics class in `snnsim.stats` has `reset()` and
`write(out, indent)`; `out` is any text stream, for instance an open file or
`io.StringIO`.

```python
import io
from snnsim.stats import FifoStats

stats = FifoStats()
stats.n_pushes = 3
buffer = io.StringIO()
stats.write(buffer, 4)
print(buffer.getvalue())
```

## What this package does not do

It models the memory controller, its ports and the pooling pipeline only. It
has no multiplier mesh, reduce network, neuron-state updater, collection bus
or off-chip DRAM model: the results the controller stores must be delivered
on its write connections by the caller. There is no command-line program, no
configuration-file reader and no whole-network driver.