[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shrink"
version = "0.1.0"
description = "Huffman, LZSS and deflate-style file compression with a small command-line tool"
requires-python = ">=3.10"
dependencies = []
keywords = ["compression", "huffman", "lzss", "deflate", "archiving"]
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
    "Topic :: System :: Archiving :: Compression",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
shrink = "shrink.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["shrink"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
