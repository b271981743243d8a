[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ciberrob"
version = "0.1.0"
description = "Client library for robot agents that register with a maze simulator over UDP, read its sensor messages and send actions"
requires-python = ">=3.10"
dependencies = []
keywords = ["robotics", "simulator", "robot agent", "maze", "udp", "micromouse"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ciberrob"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
