[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rocketfactory"
version = "0.1.0"
description = "Inventory, order and payment building blocks for a rocket parts factory"
requires-python = ">=3.10"
dependencies = [
    "pymongo",
    "python-dotenv",
]
keywords = ["inventory", "orders", "payments", "mongodb", "migrations", "graceful-shutdown"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["rocketfactory"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
