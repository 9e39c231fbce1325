from setuptools import setup, find_packages

setup(
    name="order-reminders",
    version="0.1.0",
    packages=find_packages(include=["order_reminders", "order_reminders.*"]),
    python_requires=">=3.10",
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy>=2.0",
        "psycopg2-binary",
        "celery",
        "kombu",
        "prometheus-client",
        "prometheus-fastapi-instrumentator",
        "python-dotenv",
        "pydantic>=2",
        "pydantic-settings>=2.7",
        "pytest",
        "httpx",
    ],
)
