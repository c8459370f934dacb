# setup.py
from setuptools import setup, find_packages

setup(
    name="doc_scout",
    version="0.1.0",
    description="Async explorer that gathers readable content from a page and its same-domain neighbourhood",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "playwright>=1.40",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "doc-scout=doc_scout.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
