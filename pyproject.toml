[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "snnsim"
version = "0.1.0"
description = "Cycle-level model of the memory controller, ports and spike pooling pipeline of an output-stationary spiking neural network accelerator"
requires-python = ">=3.10"
keywords = ["spiking neural network", "accelerator", "simulator", "systolic array", "pooling"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Topic :: System :: Emulators",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["snnsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
