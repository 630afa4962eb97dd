from pathlib import Path

from setuptools import setup, find_packages

readme = Path(__file__).parent / "README.md"

setup(
    name="email-scraper",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "fastapi>=0.100.0",
        "uvicorn>=0.15.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "python-dotenv>=0.19.0",
        "beautifulsoup4>=4.9.0",
        "crawl4ai>=0.4.0",
        "aiohttp>=3.8.0",
        "openai>=1.0.0",
        "psutil>=5.9.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "httpx>=0.24.0",
        ],
    },
    python_requires=">=3.10",
    author="Christo Strydom",
    author_email="christo.strydom@gmail.com",
    description="Polite website crawler that extracts contact data and exports it as CSV",
    long_description=readme.read_text() if readme.exists() else "",
    long_description_content_type="text/markdown",
    entry_points={
        "console_scripts": [
            "email-scraper=email_scraper.cli:main",
            "email-scraper-api=email_scraper.services.api.main:run",
        ],
    },
)
