[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "preflate"
version = "0.1.0"
description = "Deflate stream analysis: bit-level I/O, Huffman tables, token blocks, hash chains and PNG IDAT handling"
requires-python = ">=3.10"
dependencies = []
keywords = ["deflate", "huffman", "compression", "zlib", "png", "recompression"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: System :: Archiving :: Compression",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["preflate"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
