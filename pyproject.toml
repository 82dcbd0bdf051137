[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "konnekt-session"
version = "0.1.0"
description = "Lobby, activity and player session model with a WebSocket relay and WebRTC signaling server"
requires-python = ">=3.10"
dependencies = [
    "aiohttp",
]
keywords = [
    "lobby",
    "session",
    "multiplayer",
    "websocket",
    "webrtc",
    "signaling",
    "games",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: AsyncIO",
    "Framework :: aiohttp",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
konnekt-session = "konnekt_session.server:main"

[tool.hatch.build.targets.wheel]
packages = ["konnekt_session"]

[tool.hatch.build.targets.sdist]
include = [
    "konnekt_session",
    "tests",
    "pyproject.toml",
]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
