from setuptools import setup, find_packages

setup(
    name="hist-sketch",
    version="0.1.0",
    description="Bounded-memory streaming histograms with optional exponential decay",
    author="adamfilli",
    packages=find_packages(include=["histsketch", "histsketch.*"]),
    install_requires=[
        "matplotlib",
        "pandas",
    ],
    extras_require={
        "test": ["pytest"],
    },
    include_package_data=True,
    python_requires=">=3.11",
)
