[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fluentkit"
version = "1.0.0"
description = "Fluent design palette, theming, table models, settings, logging, project scaffolding and HTTP helpers for desktop applications"
requires-python = ">=3.10"
keywords = [
    "fluent",
    "theme",
    "colors",
    "table-model",
    "captcha",
    "settings",
    "logging",
    "http",
    "aes",
    "scaffolding",
]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Topic :: Software Development :: User Interfaces",
]
dependencies = [
    "requests",
    "cryptography",
    "platformdirs",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["fluentkit"]

[tool.hatch.build.targets.sdist]
include = ["fluentkit", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
