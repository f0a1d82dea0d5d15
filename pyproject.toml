[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "flutelistener"
version = "0.1.0"
description = "Listen to a flute through the microphone, detect the notes played and follow along with a note sequence in the terminal."
requires-python = ">=3.10"
keywords = ["flute", "pitch detection", "tuner", "music practice", "fft", "terminal"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console :: Curses",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Analysis",
]
dependencies = [
    "numpy",
    "pygame",
    "platformdirs",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
flutelistener = "flutelistener.app:main"

[tool.hatch.build.targets.wheel]
packages = ["flutelistener"]

[tool.pytest.ini_options]
addopts = "-ra"
