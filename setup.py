#!/usr/bin/env python3

from setuptools import setup, find_packages

import re
import ast

# Can't import multiform/ so "standard practice" is just to parse it as a string
version_re = re.compile(r'VERSION\s+=\s+(.*)')
with open('multiform/__init__.py', 'rb') as f:
    version = str(ast.literal_eval(version_re.search(f.read().decode('utf-8')).group(1)))

setup(
    name="multiform",
    description="Extensible multipart/form-data body encoder",
    license="MIT",
    version=version,
    packages=find_packages(include=["multiform", "multiform.*"]),
    package_data={"multiform.tests": ["fixtures/*/*", "fixtures/*/*/*", "fixtures/*/*/*/*"]},
    python_requires=">=3.7",
    install_requires=["click", "click-aliases", "rich", "pyyaml", "jinja2"],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "multiform = multiform.cli:multiform",
        ]
    },
)
