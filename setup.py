"""
Setup script for the impostor-session package.

Installs the ``impostor_session`` package from src/ together with its
SQL schema and bundled default word packs.
"""

from setuptools import setup, find_packages

setup(
    name="impostor-session",
    version="1.0.0",
    description="Session engine for an impostor social-deduction party game",
    author="Impostor Game Team",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "pytest>=7.0",
            "build",
            "wheel",
        ],
    },
    package_data={
        "impostor_session": ["data/*.json"],
        "impostor_session._store": ["schema.sql"],
    },
    entry_points={
        "console_scripts": [
            "impostor-session=impostor_session.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
