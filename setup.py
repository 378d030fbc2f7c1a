# setup.py
from setuptools import setup, find_packages

setup(
    name="a11y_scout",
    version="0.1.0",
    description="Асинхронный сканер доступности сайтов A11yScout",
    packages=find_packages(include=["a11y_scout", "a11y_scout.*"]),
    package_data={"a11y_scout": ["templates/*.j2"]},
    install_requires=[
        "axe-playwright-python>=0.1.4",
        "beautifulsoup4>=4.12",
        "click>=8.2",
        "jinja2>=3.1",
        "playwright>=1.40",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "SQLAlchemy[asyncio]>=2.0",
        "aiosqlite>=0.19",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "a11y-scout=a11y_scout.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
