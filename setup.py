"""
Setup script for hostapi-client package.

This setup script is used for local development and testing.
"""

from setuptools import setup, find_packages

setup(
    name="hostapi-client",
    version="1.0.0",
    description="Credential issuance, token caching and request signing for the hosting provider API",
    author="Hosting API Team",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "pyyaml",
        "requests>=2.31.0",
        "pyjwt[crypto]>=2.4.0",
        "cryptography>=36.0.0",
        "pydantic>=2.0.0",
        "tenacity>=8.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "responses>=0.23.0",
            "black",
            "isort",
            "pylint",
        ],
    },
    entry_points={
        "console_scripts": [
            "hostapi-get-token=hostapi_client.cli.auth_token:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
    ],
)
