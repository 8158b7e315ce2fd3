from pathlib import Path

from setuptools import setup, find_packages


def _read_version():
    """Read PIP_VERSION from src/loggerplus/_version.py without importing the package."""
    namespace = {}
    source = Path(__file__).parent / "src" / "loggerplus" / "_version.py"
    exec(source.read_text(encoding="utf-8"), namespace)
    return namespace["PIP_VERSION"]


setup(
    name="loggerplus",
    version=_read_version(),
    description="Scope-aware log enrichment — tags, date stamps, microtemplates and transformers chosen by call hierarchy",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[],
    extras_require={
        "test": ["pytest>=7", "pytest-cov"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Logging",
    ],
    python_requires=">=3.11",
)
