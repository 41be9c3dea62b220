# setup.py
from setuptools import setup, find_packages

setup(
    name="cqlbench",
    version="0.1.0",
    description="Concurrent write/read load generator for CQL clusters",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.9",
    install_requires=[
        "cassandra-driver>=3.28",
        "tqdm>=4.60",
        "setproctitle>=1.2",
    ],
    extras_require={
        "test": ["pytest>=7"],
        # Optional wire compression codecs for --compression
        "compression": ["lz4", "python-snappy"],
    },
    entry_points={
        "console_scripts": [
            "cqlbench = cqlbench.cli:main",
        ],
    },
)
