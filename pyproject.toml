[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "agentaudit"
version = "0.5.0"
description = "Security auditing for AI agent skills and agents: findings, suppressions, scoring and report formatting"
requires-python = ">=3.11"
dependencies = []
keywords = ["security", "audit", "llm", "agents", "skills", "sarif"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
    "Topic :: Software Development :: Quality Assurance",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["agentaudit"]

[tool.hatch.build.targets.sdist]
include = ["agentaudit", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
strict = true
