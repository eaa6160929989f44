from setuptools import setup, find_packages
import os

setup(
    name="JACOBItools",
    version="0.1.0",
    author="James R. Beattie and Collaborators",
    author_email="james.beattie@princeton.edu",
    description="Jacobi eigen-decomposition (JIT compiled) of real symmetric matrices "
                "in float, Decimal and Fraction arithmetic",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=[
        # Core scientific computing dependencies
        "numpy>=1.20.0",
        # JIT compilation and parallelization
        "numba>=0.56.0",
        "joblib>=1.0.0",
        # Arbitrary precision trigonometry for Decimal matrices
        "mpmath>=1.2.0",
    ],
    extras_require={
        # Test suite (scipy provides the reference eigensolver)
        "test": [
            "pytest>=7.0",
            "scipy>=1.7.0",
        ],
        # Complete installation with all optional features
        "all": [
            "pytest>=7.0",
            "scipy>=1.7.0",
        ],
    },
    zip_safe=False,
)
