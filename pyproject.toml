[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "petapi"
version = "0.1.0"
description = "A small pet store and things API served as plain WSGI applications"
requires-python = ">=3.10"
dependencies = []
keywords = ["wsgi", "rest", "api", "petstore", "json"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
petapi = "petapi.app:main"

[tool.hatch.build.targets.wheel]
packages = ["petapi"]

[tool.pytest.ini_options]
addopts = "-ra"
