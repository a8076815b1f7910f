[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "edgeagent"
version = "1.2.2"
description = "Building blocks for an industrial IoT edge agent: bounded buffers, payload and Modbus frame checks, simulated GPIO, health state and command validation"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = [
    "iot",
    "edge",
    "modbus",
    "gpio",
    "mqtt",
    "health-check",
    "industrial",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Manufacturing",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: System :: Monitoring",
    "Topic :: System :: Hardware",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["edgeagent"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
