"""Build and install the navtool package."""

from setuptools import setup, find_packages

setup(
    name="navtool",
    version="0.1.0",
    description="Navigation stream resolution and N0 packet encoding",
    package_dir={"": "python"},
    packages=find_packages("python"),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "pyserial",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "navtool=navtool.cli:main",
        ],
    },
)
