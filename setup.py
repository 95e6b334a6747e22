"""
Setup configuration for the cargo-sync-readme package.

This script uses setuptools to package and distribute the cargo-sync-readme
tool. It also reads the requirements and long description directly
from external files for ease of maintenance.
"""
from setuptools import find_packages, setup

VERSION = "0.1.0"


def read_requirements():
    """
    Read requirements from requirements.txt file.
    """
    with open("requirements.txt", encoding="UTF-8") as file:
        return [line.strip() for line in file if line.strip()]


def get_long_description():
    """
    Read README.md file.
    """
    with open("README.md", encoding="utf8") as file:
        return file.read()


setup(
    name="cargo-sync-readme",
    description="Generate a Markdown section in your README based on your Rust documentation.",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    license="BSD-3-Clause",
    version=VERSION,
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=read_requirements(),
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": [
            "cargo-sync-readme=cargo_sync_readme.cli:cli",
        ]
    },
    python_requires=">=3.11",
)
