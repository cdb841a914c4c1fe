[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lrzkit"
version = "0.1.0"
description = "Tools for lrzip archives: magic headers, archive inspection, x86/IA-64 and delta filters, and input helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["lrzip", "compression", "archive", "bcj", "delta", "filter"]
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
    "Topic :: System :: Archiving :: Compression",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lrzkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
