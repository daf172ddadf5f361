# setup.py
from setuptools import setup, find_packages

setup(
    name="wiki_scout",
    version="0.1.0",
    description="Потоковая выгрузка списка страниц Википедии через API (generator=allpages)",
    packages=find_packages(exclude=["tests", "tests.*"]),  # автоматически найдёт папку wiki_scout
    install_requires=[
        "aiohttp>=3.9",
        "click>=8.1",
        "lxml>=5.0",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "yarl>=1.9",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "wiki-scout=wiki_scout.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
