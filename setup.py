"""Setup configuration for proving-ground."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="proving-ground",
    version="0.1.0",
    description="Run prove-driven TAP test suites between before/after hooks",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*", "examples", "examples.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX",
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Testing",
    ],
    python_requires=">=3.9",
    install_requires=[
        "click>=8.0",
        "rich>=13.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "examples": [
            "httpx>=0.24.0",
            "selenium>=4.10",
            "tap.py>=3.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "proving-ground=proving_ground.cli:cli",
        ],
    },
)
