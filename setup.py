from setuptools import setup, find_packages

setup(
    name="linereader",
    version="0.1",
    description="Streaming line splitter for files, sockets and HTTP bodies",
    author='linereader team',
    packages=find_packages("src"),
    package_dir={'': 'src'},
    python_requires=">=3.8",
    install_requires=[
        "aiohttp>=3.5.4",
        "certifi>=2019.3.9"
    ],
    extras_require={
        "test": [
            "pytest>=6.0",
            "pytest-asyncio>=0.14",
            "hypothesis>=5.0"
        ]
    }
)
