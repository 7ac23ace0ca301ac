"""
Setup script for flowmarch package.
"""

from setuptools import setup, find_packages
import os

# Read README file
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return ""

# Read requirements
def read_requirements():
    req_path = os.path.join(os.path.dirname(__file__), 'requirements.txt')
    if os.path.exists(req_path):
        with open(req_path, 'r') as f:
            return [line.strip() for line in f if line.strip() and not line.startswith('#')]
    return []

setup(
    name="flowmarch",
    version="0.1.0",
    author="flowmarch Development Team",
    description="Explicit time marching of particles through 2D velocity fields",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Physics",
    ],
    python_requires=">=3.9",
    install_requires=read_requirements(),
    extras_require={
        "jax": ["jax"],
        "hdf5": ["h5py"],
        "plot": ["matplotlib"],
        "dev": ["pytest"],
        "all": ["jax", "h5py", "matplotlib", "pytest"],
    },
    entry_points={
        "console_scripts": [
            "flowmarch=flowmarch.__main__:main",
        ],
    },
    keywords="particle tracking, advection, time integration, adams-bashforth, lagrangian",
    include_package_data=True,
)
