"""
Setup configuration for the restchain package.
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="restchain",
    version="0.1.0",
    author="restchain Contributors",
    description="Fluent given / when / then / extract chains for testing HTTP APIs",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Testing",
        "Topic :: Internet :: WWW/HTTP",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "validation": ["pydantic>=2.0.0"],
        "test": [
            "pytest>=6.0",
            "pydantic>=2.0.0",
            "uvicorn",
            "starlette",
        ],
        "dev": [
            "pytest>=6.0",
            "pytest-cov",
            "pydantic>=2.0.0",
            "uvicorn",
            "starlette",
            "ruff",
            "mypy",
        ],
    },
)
