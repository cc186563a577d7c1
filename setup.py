from setuptools import setup, find_packages

setup(
    name="onenote-cli",
    version="0.1.0",
    description="Self-contained CLI for OneNote (list, search, export)",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=["InquirerPy", "tqdm"],
    extras_require={
        "mcp": ["fastmcp"],
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "onenote=onenote_cli.__main__:main",
        ]
    },
)
