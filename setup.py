from setuptools import find_packages, setup

setup(
    name="seo-audit-pro",
    version="0.1.0",
    description="Live single-page SEO audit with CSV export",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "playwright",
        "beautifulsoup4>=4.12",
        "lxml",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": [
            "seo-audit-pro=seo_audit_pro.cli:main",
        ],
    },
)
