[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "instopts"
version = "0.1.0"
description = "Option trees and preset selection for installer configuration steps"
requires-python = ">=3.10"
keywords = ["installer", "options", "presets", "yaml", "setup"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Installation/Setup",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["instopts"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
