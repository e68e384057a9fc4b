[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "microtrade"
version = "1.0.0"
description = "A small shop client and server that exchange JSON requests over TCP and keep user accounts in SQLite"
requires-python = ">=3.10"
dependencies = []
keywords = ["trade", "shop", "point-of-sale", "tcp", "json", "sqlite", "client-server"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Point-Of-Sale",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
microtrade-server = "microtrade.server:main"
microtrade-client = "microtrade.client:main"

[tool.hatch.build.targets.wheel]
packages = ["microtrade"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
