# setup.py
from setuptools import setup, find_packages

setup(
    name="gw2-market",
    version="0.1.0",
    description="Parallel item catalog dump and skin-set price comparison for the Guild Wars 2 API",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.9",
    install_requires=[
        "requests",
        "tqdm",
        "setproctitle",
        "python-dotenv",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "gw2-market=gw2_market.cli:main",
        ],
    },
)
