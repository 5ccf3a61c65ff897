[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "coolcgen"
version = "0.1.0"
description = "MIPS assembly code generator for typed Cool abstract syntax trees"
requires-python = ">=3.10"
dependencies = []
keywords = ["cool", "compiler", "code generation", "mips", "spim"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["coolcgen"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
