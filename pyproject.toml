[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "reconmap"
version = "0.1.0"
description = "Request records, an ASN cache and graph exporters for DNS and network reconnaissance results"
requires-python = ">=3.10"
keywords = ["dns", "asn", "netblock", "reconnaissance", "graph", "gexf", "graphviz", "maltego", "d3", "graphistry"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Information Technology",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: Name Service (DNS)",
    "Topic :: Security",
    "Topic :: Scientific/Engineering :: Visualization",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["reconmap"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
