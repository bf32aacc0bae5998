#!/usr/bin/env python3
"""
Setup script for topicsum.
"""

from setuptools import setup, find_packages
import os

def parse_requirements(filename):
    """Parse a pip requirements file into a list of install_requires."""
    path = os.path.join(os.path.dirname(os.path.abspath(__file__)), filename)
    if not os.path.exists(path):
        return []
    with open(path, "r") as f:
        lines = f.readlines()
    return [
        line.strip()
        for line in lines
        if line.strip() and not line.strip().startswith("#")
    ]

setup(
    name="topicsum",
    version="1.0.0",
    author="topicsum developers",
    description="Topic-space extractive summarization of biomedical article abstracts",
    packages=find_packages(include=["topicsum", "topicsum.*"]),
    package_data={"topicsum": ["config.yaml"]},
    include_package_data=True,
    zip_safe=False,
    install_requires=parse_requirements("pip_requirements.txt"),
    extras_require={
        "test": ["pytest>=7.0"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
