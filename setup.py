"""
Setup script for jsonrequest.
"""

from pathlib import Path
from setuptools import find_packages, setup

# Read version from VERSION file
version_file = Path(__file__).parent / "VERSION"
version = version_file.read_text().strip()

setup(
    name="jsonrequest",
    version=version,
    description="JSON request helper over pluggable HTTP transports",
    packages=find_packages(include=["jsonrequest", "jsonrequest.*"]),
    python_requires=">=3.10",
    install_requires=[
        "httpx>=0.27",
        "pydantic>=2.5",
        "structlog>=24.1",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
)
