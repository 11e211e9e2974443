# setup.py
from setuptools import setup, find_packages

setup(
    name="tmsu_db",
    version="0.7.0",
    description="Storage-access layer for the TMSU file-tagging tool (SQLite, MySQL, Postgres)",
    author="Swift Fox",
    packages=find_packages(
        exclude=(
            "tests",
            "tests.*",
            "docs",
            "build",
            "dist",
        )
    ),
    python_requires=">=3.10",
    install_requires=[
        "PyMySQL>=1.0",
        "psycopg2-binary>=2.9",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": [
            "tmsu-db=tmsu_db.cli:main",
        ],
    },
)
