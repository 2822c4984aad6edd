[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rpscale"
version = "0.1.0"
description = "Scale readings, stable-weight tracking, serial device discovery and a mobile discovery/monitor contract for weighing stations"
requires-python = ">=3.10"
keywords = [
    "scale",
    "weighing",
    "serial",
    "discovery",
    "bonjour",
    "dns-sd",
    "monitor",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Manufacturing",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
    "Topic :: System :: Networking",
    "Topic :: Terminals :: Serial",
]
dependencies = [
    "psutil>=5.9",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
]

[tool.hatch.build.targets.wheel]
packages = ["rpscale"]

[tool.hatch.build.targets.sdist]
include = [
    "rpscale",
    "tests",
]

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
