[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rulefilter"
version = "0.1.0"
description = "Rule-driven filters: JSON-configured conditions that, when met, assign or delete values in your data."
requires-python = ">=3.10"
dependencies = []
keywords = ["rules", "filter", "conditions", "json", "assignment", "rule-engine"]
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
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rulefilter"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
