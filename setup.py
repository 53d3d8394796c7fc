"""Setup script for heroku-san."""

from setuptools import find_packages, setup

with open("requirements.txt") as f:
    requirements = f.read().splitlines()

setup(
    name="heroku-san",
    version="4.3.0",
    description="Deploy and manage multiple Heroku stages of one application",
    author="heroku-san developers",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={"heroku_san": ["templates/*.yml"]},
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.4",
            "fastapi>=0.110",
            "uvicorn>=0.27",
        ],
    },
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "heroku-san=heroku_san.__main__:main",
        ],
    },
)
