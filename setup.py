"""Setup script for S3 Credentials."""

from setuptools import setup, find_packages

# Read long description from README
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="s3-credentials",
    version="0.1.0",
    author="S3 Credentials Team",
    author_email="credentials@example.com",
    description="Credential provider chain and refresh cache for S3-compatible object storage clients",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yourusername/s3-credentials",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "python-dotenv>=1.0.0",
        "httpx>=0.25.0",
        "rich>=13.0.0",
        "click>=8.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "s3-credentials=s3_credentials.cli:main",
        ],
    },
)
