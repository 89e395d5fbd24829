[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sdskit"
version = "0.1.0"
description = "Binary-safe dynamic byte strings, argument splitting, client TLS contexts and a manual-tick poll adapter"
requires-python = ">=3.10"
dependencies = []
keywords = ["strings", "dynamic-strings", "bytes", "tokenizer", "tls", "poll"]
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
    "Topic :: Software Development :: Libraries",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sdskit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
