[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "livebg"
version = "0.1.0"
description = "Animated wallpaper effects: colour cycling images, starfields, ripples, distortion and waves"
requires-python = ">=3.10"
dependencies = []
keywords = ["wallpaper", "color cycling", "lbm", "iff", "palette", "animation", "noise"]
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
    "Topic :: Multimedia :: Graphics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["livebg"]

[tool.pytest.ini_options]
addopts = "-ra"
