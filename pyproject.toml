[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mnistff"
version = "0.1.0"
description = "A small feed-forward neural network that learns MNIST digits with RMSProp"
requires-python = ">=3.10"
keywords = ["mnist", "neural-network", "rmsprop", "machine-learning", "numpy"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]
dependencies = [
    "numpy",
    "pillow",
    "tqdm",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
mnistff = "mnistff.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["mnistff"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
