[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fennelchain"
version = "0.1.0"
description = "In-memory ledger modules for certificates, identities, submissions and key announcements, with a small runtime for balances, locks, events and rollback."
requires-python = ">=3.10"
dependencies = []
keywords = ["ledger", "identity", "certificate", "keystore", "runtime", "state-machine"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fennelchain"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
