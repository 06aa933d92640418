[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "geecache"
version = "0.1.0"
description = "A distributed in-memory cache with LRU eviction, consistent hashing and request coalescing"
requires-python = ">=3.10"
dependencies = []
keywords = ["cache", "lru", "distributed", "consistent-hashing", "singleflight"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
geecache = "geecache.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["geecache"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
