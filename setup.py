"""
Setup configuration for Mandarin Lesson Generator.
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="mandarin-lesson-generator",
    version="0.1.0",
    author="Mandarin Lesson Generator Team",
    description="Flashcard and quiz generation from Mandarin lessons",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["mandarin_lesson_generator", "mandarin_lesson_generator.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.21.0",
        "pypinyin>=0.47.0",
        "genanki>=0.13.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "hypothesis>=6.0.0,<6.57",
            "black>=22.0.0",
            "flake8>=4.0.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "mandarin-lesson-generator=mandarin_lesson_generator.main:main",
        ],
    },
)
