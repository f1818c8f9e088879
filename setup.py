"""
ternary-boehm: Exact Real Computation over Ternary Boehm Codes

Computable reals as nested families of dyadic intervals, with:
1. Dyadic values, general intervals and canonical ternary tree nodes
2. Computable functions carrying effective moduli of continuity
3. Approximate predicates decided at explicit precisions
4. Grid and semi-decidable search over compact domains
5. Eclipse-pruning global minimization and maximization
"""

from setuptools import setup, find_packages

setup(
    name="ternary-boehm",
    version="1.0.0",
    description="Exact real computation, search and optimization over ternary Boehm codes",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="ternary-boehm developers",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*", "benchmarks", "benchmarks.*"]),
    install_requires=[
        "numpy>=1.24.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "hypothesis>=6.0",
            "tabulate>=0.9",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
)
