from __future__ import annotations

from pathlib import Path

from setuptools import find_packages, setup  # type: ignore


ROOT = Path(__file__).resolve().parent
README = ROOT / "README.md"


def _long_description() -> str:
    if not README.exists():
        return ""
    return README.read_text(encoding="utf-8")


setup(
    name="contentreg",
    version="0.1.0",
    description="Content-ownership registry: fingerprint dedup, single-owner transfer and an admin-gated validation rule",
    long_description=_long_description(),
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "fastapi>=0.100",
        "uvicorn>=0.23",
        "httpx>=0.24",
    ],
    extras_require={
        "test": [
            "pytest>=7",
        ],
    },
    entry_points={
        "console_scripts": [
            "contentreg=contentreg.__main__:main",
        ],
    },
)
