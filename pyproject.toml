[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sumikko"
version = "0.1.0"
description = "Small desktop pets that wander along the bottom of the screen and stack on one another"
requires-python = ">=3.10"
keywords = ["desktop", "pet", "tkinter", "animation", "mascot"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: X11 Applications",
    "Environment :: Win32 (MS Windows)",
    "Environment :: MacOS X",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "filelock",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sumikko = "sumikko.app:main"

[tool.hatch.build.targets.wheel]
packages = ["sumikko"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
