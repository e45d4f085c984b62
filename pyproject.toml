[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "slimequest"
version = "0.1.0"
description = "Game logic for a small 3D action game: characters, slime enemies, collision, model animation and asset parsing."
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "collision", "animation", "wav", "character", "enemy", "ai"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["slimequest"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
