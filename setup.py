#!/usr/bin/env python3
# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Setup script for the puzzle generator package.
"""

from setuptools import setup
from pathlib import Path

# Read the README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="puzzle-generator",
    version="1.0.0",
    author="TrailLensCo",
    description="Crossword, word-search, Sudoku and Soletra puzzle generators",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    py_modules=[
        "config",
        "crossword_layout",
        "dictionary_index",
        "logging_config",
        "models",
        "puzzle_generator",
        "soletra",
        "sudoku_generator",
        "validator",
        "word_selector",
        "wordsearch",
    ],
    packages=["puzzle_data"],
    python_requires=">=3.10",
    install_requires=[
        "pyyaml>=6.0.2",
    ],
    package_data={
        "puzzle_data": [
            "*.txt",
        ],
    },
    include_package_data=True,
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "black>=23.0.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "puzzle-generator=puzzle_generator:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Games/Entertainment :: Puzzle Games",
    ],
)
