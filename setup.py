from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="trusty",
    version="0.1.0",
    description="Multi-tenant authorization and identity administration service",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["trusty", "trusty.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Security",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.11",
    install_requires=[
        "pydantic[email]>=2.5.0",
        "pydantic-settings>=2.1.0",
        "python-ulid>=2.2.0",
        "asyncpg>=0.29.0",
        "aiosqlite>=0.19.0",
        "sqlalchemy[asyncio]>=2.0.23",
        "click>=8.1.7",
        "rich>=13.7.0",
        "python-dotenv>=1.0.0",
        "structlog>=23.2.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "trusty=trusty.cli.main:cli",
        ],
    },
)
