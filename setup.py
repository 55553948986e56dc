"""Setup script for fomega."""

from setuptools import setup, find_packages

setup(
    name="fomega",
    version="0.1.0",
    description="A type checker and reducer for System F-omega implemented in Python",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.10",
    install_requires=[
        "click>=8.1.7",
    ],
    extras_require={
        "dev": [
            "pytest>=8.1.1",
            "pytest-cov>=5.0.0",
            "mypy>=1.9.0",
            "black>=24.3.0",
            "ruff>=0.3.4",
        ],
    },
    entry_points={
        "console_scripts": [
            "fomega=fomega.cli:main",
        ],
    },
)
