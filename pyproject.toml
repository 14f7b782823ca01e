[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sbwt"
version = "0.1.0"
description = "Spectral Burrows-Wheeler transform building blocks: DNA k-mers, graph nodes and the construction of the SBWT bit vectors"
requires-python = ">=3.10"
dependencies = []
keywords = ["bioinformatics", "k-mer", "sbwt", "burrows-wheeler", "de-bruijn-graph", "fasta", "fastq"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sbwt"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
