[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dcccentral"
version = "0.1.0"
description = "A small DCC model railway command station: packet encoding, signal bit streams, controller state, relay pulses and a throttle mapping."
requires-python = ">=3.10"
dependencies = []
keywords = ["dcc", "model railway", "command station", "locomotive", "turnout", "accessory decoder"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Environment :: Console",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Home Automation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
dcccentral = "dcccentral.station:main"

[tool.hatch.build.targets.wheel]
packages = ["dcccentral"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
