"""
Setup script for imgconvertx.

This script configures the package for installation via pip.
Supports both development and production installations.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README for long description
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8')

setup(
    name="imgconvertx",
    version="1.0.0",
    description="Cached image conversion, scaling, cropping and masking on top of ImageMagick/GraphicsMagick",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="imgconvertx Contributors",
    author_email="",
    packages=find_packages(include=["imgconvertx", "imgconvertx.*"]),
    install_requires=[
        "Pillow>=10.0.0",
        "pypdf>=3.0.0",
        "pydantic>=2.0.0",
        "click>=8.0.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "imgconvertx=imgconvertx.cli:cli",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Multimedia :: Graphics :: Graphics Conversion",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
    keywords="image imagemagick graphicsmagick convert resize crop mask cache",
    license="MIT",
    include_package_data=True,
    zip_safe=False,
)
