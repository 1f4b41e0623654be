[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tenvkit"
version = "0.1.0"
description = "Building blocks for a version manager of infrastructure tools: environment settings, remote configuration, downloads, release listing, checksum and signature checks, archive extraction and process proxying."
requires-python = ">=3.10"
dependencies = [
    "beautifulsoup4",
]
keywords = [
    "version-manager",
    "terraform",
    "opentofu",
    "terragrunt",
    "atmos",
    "installer",
    "checksum",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Installation/Setup",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
tenvkit-changelog-check = "tenvkit.changelog_check:main"

[tool.hatch.build.targets.wheel]
packages = ["tenvkit"]

[tool.hatch.build.targets.sdist]
include = ["tenvkit", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
