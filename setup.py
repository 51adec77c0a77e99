from setuptools import setup, find_packages


setup(
    name="plainar",
    version="0.1",
    packages=find_packages(include=["plainar", "plainar.*"]),
    description="Deterministic reader/writer for plain Unix ar archives.",
    author="vercingetorx",
    python_requires=">=3.8",
    install_requires=[],
    entry_points={
        "console_scripts": [
            "plainar=plainar.cli:main",
        ]
    },
)
