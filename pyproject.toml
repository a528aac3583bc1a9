[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mcpserver"
version = "0.1.0"
description = "Model Context Protocol server framework: line-delimited JSON-RPC transport, routing for tools, resources and prompts, and a server-sent-events front end"
requires-python = ">=3.10"
keywords = ["mcp", "model-context-protocol", "json-rpc", "server", "sse", "asyncio"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Framework :: AsyncIO",
    "Framework :: aiohttp",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]
dependencies = [
    "aiohttp>=3.9",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
    "pytest-asyncio>=0.23",
]

[project.scripts]
mcpserver-counter = "mcpserver.counter_server:main"
mcpserver-sse = "mcpserver.sse_app:main"

[tool.hatch.build.targets.wheel]
packages = ["mcpserver"]

[tool.hatch.build.targets.sdist]
include = ["mcpserver", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
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
