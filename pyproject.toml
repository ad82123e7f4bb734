[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "crdgen"
version = "0.1.0"
description = "Build Kubernetes CustomResourceDefinition objects and OpenAPI v3 validation schemata from typed API descriptions."
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "crd", "openapi", "json-schema", "code-generation"]
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
    "Topic :: Software Development :: Code Generators",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["crdgen"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
