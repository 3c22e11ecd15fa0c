[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mcpd"
version = "0.1.0"
description = "A small line-based TCP server that keeps per-client context key/value data"
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "server", "protocol", "context", "key-value"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: No Input/Output (Daemon)",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
mcpd = "mcpd.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["mcpd"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
