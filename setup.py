"""Setup script for the apolohra package following Cosmic Python pattern."""

from setuptools import setup, find_namespace_packages

setup(
    name="esmeralda-apolohra",
    version="1.0.0",
    description="ApoloHRA - REST API for the Esmeralda COVID-19 surveillance monitor",
    author="Esmeralda Monitor Team",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["apolohra*"]),
    py_modules=["config"],
    python_requires=">=3.11",
    install_requires=[
        "fastapi",
        "uvicorn[standard]",
        "pydantic",
        "sqlalchemy",
        "pymysql",
        "psycopg2-binary",
        "python-jose[cryptography]",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-cov",
            "httpx",
        ],
        "dev": [
            "black",
            "flake8",
            "mypy",
            "pre-commit",
        ],
    },
    entry_points={
        "console_scripts": [
            "apolohra-api=apolohra.entrypoints.apolohra_api:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Healthcare Industry",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: Medical Science Apps.",
    ],
)
