[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hydrobuddy"
version = "0.1.0"
description = "Daily water intake tracker with periodic drinking reminders and weekly statistics"
requires-python = ">=3.10"
keywords = ["water", "hydration", "reminder", "health", "tracker"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]
dependencies = [
    "platformdirs",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
hydrobuddy = "hydrobuddy.app:main"

[tool.hatch.build.targets.wheel]
packages = ["hydrobuddy"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
