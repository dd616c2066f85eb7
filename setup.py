from setuptools import setup, find_packages

setup(
    name="beach-temperature-sync",
    version="0.1.0",
    description="Synchronizes current beach water temperatures from an NGSI-LD context broker into PostGIS",
    author="Geodata Integration Team",
    packages=find_packages(include=["src", "src.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.0",
        "requests>=2.28",
        "urllib3>=1.26",
        "sqlalchemy>=2.0",
        "psycopg2-binary>=2.9",
        "python-dotenv>=1.0",
        "pyyaml>=6.0",
        "pytz>=2023.3",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "beach-temperature-sync=src.sync.cli:main",
        ],
    },
)
