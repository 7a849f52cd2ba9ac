# setup.py
from setuptools import setup, find_packages

setup(
    name="intake_crawler",
    version="0.1.0",
    description="Асинхронный краулер сайтов для подготовки текста при intake",
    packages=find_packages(exclude=("tests", "tests.*")),
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "click>=8.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "intake-crawler=intake_crawler.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
