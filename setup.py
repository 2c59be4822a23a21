from setuptools import setup, find_packages

setup(
    name="ballotbase",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    install_requires=[
        "pyyaml",
        "pydantic>=2",
        "reportlab>=4.0",
        "pymongo",
        "gradio",
    ],
    extras_require={
        "test": [
            "pytest",
            "pypdf",
        ],
    },
    entry_points={
        "console_scripts": [
            "ballotbase=ballotbase.cli:main",
            "ballotbase-ui=ballotbase.ui:main",
        ],
    },
)
