from setuptools import setup, find_packages

setup(
    name="validation-class",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pyyaml>=6.0",
        "click>=8.0.0",
        "rich>=13.0.0",
        "tabulate>=0.9.0"
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0"
        ]
    },
    entry_points={
        "console_scripts": [
            "validation-class=validation_class.presentation.cli.main:main",
        ],
    },
    python_requires=">=3.10",
)
