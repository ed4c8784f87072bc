[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "flitvcs"
version = "0.1.0"
description = "A tiny Git-like version control system with content-addressed objects, an index, branches and checkout"
requires-python = ">=3.10"
dependencies = []
keywords = ["version-control", "vcs", "git", "content-addressed", "objects"]
classifiers = [
    "Development Status :: 2 - Pre-Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Version Control",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
flit = "flitvcs.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["flitvcs"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
