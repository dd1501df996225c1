from setuptools import setup, find_packages

setup(
    name="ohw-sentinel",
    version="0.1.0",
    packages=find_packages(include=["ohw_sentinel", "ohw_sentinel.*"]),
    python_requires=">=3.10",
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy>=2.0",
        "alembic",
        "psycopg2-binary",
        "python-dotenv",
        "pydantic>=2",
        "pydantic-settings>=2",
        "celery",
        "prometheus-client",
        "prometheus-fastapi-instrumentator",
        "python-dateutil",
        "jinja2",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
