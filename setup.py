"""
Setup configuration for the Fret Sensei package.

This allows you to install the project with:
    pip install -e .

After installation, you can import modules like:
    from fretsensei.theory.fretboard import annotate
    from fretsensei.theory.voicings import get_voicing
    from fretsensei.playback import PlaybackTimeline
"""

from setuptools import setup, find_packages

# Read the README for long description
with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    # -------------------------
    # Basic Package Information
    # -------------------------
    name="fret-sensei",
    version="0.1.0",
    description="Guitar fretboard theory engine with difficulty-tiered voicings and a coaching playback timeline",
    long_description=long_description,
    long_description_content_type="text/markdown",

    # -------------------------
    # Package Discovery
    # -------------------------
    packages=find_packages(include=["fretsensei", "fretsensei.*"]),

    # The YAML tables ship inside fretsensei/data
    package_data={"fretsensei.data": ["*.yaml"]},
    include_package_data=True,

    # -------------------------
    # Python Version Requirement
    # -------------------------
    python_requires=">=3.9",

    # -------------------------
    # Dependencies
    # -------------------------
    install_requires=[
        "pydantic>=2.0.0",
        "pyyaml>=6.0",
    ],

    # Optional dependencies (install with pip install -e ".[dev]")
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "flake8>=6.1.0",
            "black>=23.7.0",
            "mypy>=1.5.0",
        ],
    },

    # -------------------------
    # Entry Points (CLI commands)
    # -------------------------
    entry_points={
        "console_scripts": [
            # fretsensei annotate E7 --scale "E Mixolydian"
            "fretsensei=fretsensei.app.cli:main",
        ],
    },

    # -------------------------
    # Metadata
    # -------------------------
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Education",
        "Topic :: Multimedia :: Sound/Audio",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    keywords="guitar, fretboard, chords, scales, voicings, music theory",
)
