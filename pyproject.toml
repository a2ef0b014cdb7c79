[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "blockheat"
version = "0.1.0"
description = "A block-breaking arcade game with a stage editor and an 8x12 bitmap font"
requires-python = ">=3.10"
dependencies = [
    "pygame",
]
keywords = ["game", "arcade", "breakout", "blocks", "pygame", "level-editor", "bitmap-font"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: MacOS X",
    "Environment :: Win32 (MS Windows)",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Arcade",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
blockheat = "blockheat.app:main"
blockheat-edit = "blockheat.editor:main"

[tool.hatch.build.targets.wheel]
packages = ["blockheat"]

[tool.pytest.ini_options]
addopts = "-ra"
