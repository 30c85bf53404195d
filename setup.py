from setuptools import find_packages, setup

setup(
    name="reseeder",
    version="0.0.0",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "fastapi",
        "uvicorn",
        "pydantic",
        "cryptography",
        "click",
        "stem",
        "psutil",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "reseeder=reseeder.cli:cli",
        ],
    },
)
