[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "miniyeska"
version = "0.1.0"
description = "A small command shell with pipes, redirections, here-documents, subshells, && / || lists and wildcard expansion."
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "posix", "command-line", "repl", "pipes", "wildcards"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
miniyeska = "miniyeska.repl:main"

[tool.hatch.build.targets.wheel]
packages = ["miniyeska"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
