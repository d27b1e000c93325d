[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "devbase"
version = "0.1.0"
description = "Building blocks for small networked devices: AES-128 blocks, MP3 header parsing, work queues, block pools and socket helpers"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "aes",
    "mp3",
    "udp",
    "tcp",
    "epoll",
    "serial",
    "http-download",
    "work-queue",
    "memory-pool",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["devbase"]

[tool.hatch.build.targets.sdist]
include = ["devbase", "tests", "pyproject.toml", "README.md"]

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
