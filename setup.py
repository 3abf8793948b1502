import os

from setuptools import find_packages, setup

_MLREST_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "mlrest")


def _get_version():
    version = {}
    with open(os.path.join(_MLREST_DIR, "version.py")) as f:
        exec(f.read(), version)
    return version["VERSION"]


setup(
    name="mlrest",
    version=_get_version(),
    packages=find_packages(include=["mlrest", "mlrest.*"]),
    install_requires=[
        "click>=7.0",
        "requests>=2.17.3",
        "tabulate",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points="""
        [console_scripts]
        mlrest=mlrest.cli:cli
    """,
    zip_safe=False,
    author="mlrest developers",
    description="mlrest: a typed Python client of the MLflow tracking REST API",
    license="Apache License 2.0",
    classifiers=[
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3.9",
    ],
    keywords="ml ai mlflow tracking rest",
    python_requires=">=3.9",
)
