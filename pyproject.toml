[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gorillaengine"
version = "0.1.0"
description = "A small entity-component-system game core with 3D maths, skeletal animation poses, camera control and text layout."
requires-python = ">=3.10"
keywords = ["ecs", "entity-component-system", "game", "skeletal-animation", "quaternion", "camera"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["gorillaengine"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
