[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "stockexchange"
version = "0.1.0"
description = "A small line-oriented stock trading server with select-based and thread-pool variants, plus interactive and load-generating clients."
requires-python = ">=3.10"
dependencies = []
keywords = ["stock", "server", "sockets", "select", "thread-pool", "trading"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
stockserver-select = "stockexchange.select_server:main"
stockserver-threaded = "stockexchange.thread_server:main"
stockclient = "stockexchange.client:main"
stock-multiclient = "stockexchange.multiclient:main"

[tool.setuptools]
packages = ["stockexchange"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
