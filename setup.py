from setuptools import find_packages, setup

from cyclejournal.version import CYCLEJOURNAL_VERSION

long_description = ""
with open("README.md") as ifp:
    long_description = ifp.read()

setup(
    name="cyclejournal",
    version=CYCLEJOURNAL_VERSION,
    author="Cyclejournal developers",
    description="Cyclejournal: a daily journal that asks one of 30 questions per day, in cycles",
    long_description=long_description,
    long_description_content_type="text/markdown",
    platforms="all",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: End Users/Desktop",
        "Natural Language :: English",
        "Programming Language :: Python",
        "License :: OSI Approved :: Apache Software License",
        "Topic :: Office/Business :: News/Diary",
    ],
    python_requires=">=3.8",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"cyclejournal": ["questions/questions.toml"]},
    zip_safe=False,
    install_requires=[
        "fastapi>=0.100.0",
        "pydantic>=2.0",
        "redis",
        "sqlalchemy>=2.0",
        "toml",
        "uvicorn>=0.15.0",
    ],
    extras_require={
        "dev": ["alembic", "black", "isort", "mypy", "types-toml", "types-redis"],
        "test": ["pytest", "httpx"],
        "distribute": ["setuptools", "twine", "wheel"],
    },
    entry_points={
        "console_scripts": [
            "cyclejournal=cyclejournal.journal.cli:main",
        ]
    },
)
