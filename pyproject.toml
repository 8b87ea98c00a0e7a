[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zgmserver"
version = "0.1.0"
description = "WebSocket game server with sessions, rooms, matchmaking and reconnection handling"
requires-python = ">=3.10"
keywords = ["game", "server", "websocket", "multiplayer", "matchmaking", "rooms"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: AsyncIO",
    "Framework :: aiohttp",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "aiohttp",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
zgmserver = "zgmserver.server:main"

[tool.hatch.build.targets.wheel]
packages = ["zgmserver"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
