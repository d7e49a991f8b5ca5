# setup.py
from setuptools import find_packages, setup

setup(
    name="bagtag",
    version="0.1.0",
    packages=find_packages(include=["bagtag", "bagtag.*"]),
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn[standard]>=0.29",
        "starlette>=0.37",
        "pydantic>=2.6",
        "pydantic-settings>=2.2",
        "python-multipart>=0.0.9",
        "SQLAlchemy[asyncio]>=2.0",
        "asyncpg>=0.29",
        "psycopg[binary]>=3.1",
        "alembic>=1.13",
        "structlog>=24.1",
        "sentry-sdk>=1.45",
        "slowapi>=0.1.9",
        "limits>=3.10",
        "openai>=1.30",
        "httpx>=0.27",
        "python-dotenv>=1.0",
        "Werkzeug>=3.0",
        "reportlab>=4.1",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
)
