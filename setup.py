# setup.py
from setuptools import find_packages, setup

setup(
    name="waste-tracker",
    version="0.1.0",
    python_requires=">=3.11",
    packages=find_packages(include=["waste_tracker", "waste_tracker.*"]),
    include_package_data=True,
    install_requires=[
        "fastapi>=0.110",
        "uvicorn[standard]>=0.27",
        "pydantic>=2.6",
        "pydantic-settings>=2.2",
        "SQLAlchemy[asyncio]>=2.0.25",
        "asyncpg>=0.29",
        "alembic>=1.13",
        "psycopg[binary]>=3.1",
        "structlog>=24.1",
        "sentry-sdk>=1.40",
        "limits>=3.7",
        "python-multipart>=0.0.9",
        "anyio>=4.2",
        "python-dotenv>=1.0",
        "tzdata>=2024.1",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
            "httpx>=0.27",
            "aiosqlite>=0.20",
        ],
    },
)
